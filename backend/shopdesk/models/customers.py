from __future__ import annotations

from dataclasses import dataclass


class PartyKind:
    CUSTOMER = "CUSTOMER"
    SUPPLIER = "SUPPLIER"


@dataclass(frozen=True)
class Customer:
    """
    A buyer of goods and repair services.

    balance is what the customer owes the shop: the sum of outstanding
    amounts over their non-cancelled invoices. Never negative.
    """
    id: str
    name: str
    phone: str
    address: str = ""
    balance: int = 0

    kind = PartyKind.CUSTOMER

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "address": self.address,
            "balance": self.balance,
        }


@dataclass(frozen=True)
class Supplier:
    """
    A vendor the shop imports goods from.

    balance is what the shop owes the supplier across its purchase orders.
    """
    id: str
    name: str
    phone: str
    address: str = ""
    contact_person: str = ""
    balance: int = 0

    kind = PartyKind.SUPPLIER

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "address": self.address,
            "contact_person": self.contact_person,
            "balance": self.balance,
        }
