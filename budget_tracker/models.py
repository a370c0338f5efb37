"""SQLAlchemy models for the Budget Tracker web API."""

from __future__ import annotations

import datetime as dt

from flask_sqlalchemy import SQLAlchemy

from .data_loader import Transaction, TransactionType


db = SQLAlchemy()


class TransactionRecord(db.Model):
    __tablename__ = "transactions"

    id = db.Column(db.Integer, primary_key=True)
    user_email = db.Column(db.String(120), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False)
    type = db.Column(db.String(16), nullable=False)
    amount = db.Column(db.Numeric(12, 2, asdecimal=True), nullable=False)
    category = db.Column(db.String(120))
    description = db.Column(db.String(255))
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: dt.datetime.now(dt.timezone.utc), nullable=False)

    @classmethod
    def from_transaction(cls, user_email: str, txn: Transaction) -> "TransactionRecord":
        return cls(
            user_email=user_email,
            date=txn.date,
            type=txn.type.value,
            amount=txn.amount,
            category=txn.category,
            description=txn.description,
        )

    def to_transaction(self) -> Transaction:
        return Transaction(
            date=self.date,
            type=TransactionType(self.type),
            amount=self.amount,
            category=self.category,
            description=self.description,
            id=str(self.id),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "type": self.type,
            "amount": str(self.amount),
            "category": self.category,
            "description": self.description,
        }
