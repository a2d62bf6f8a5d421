from app.models.beer import BeerBatch, BeerNoteEntry, HopAddition, MaltAddition, YeastAddition
from app.models.user import RevokedToken, User

__all__ = [
    "BeerBatch",
    "BeerNoteEntry",
    "HopAddition",
    "MaltAddition",
    "RevokedToken",
    "User",
    "YeastAddition",
]
