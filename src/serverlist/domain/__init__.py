from .types import MemberEntry, MembershipList, StoreRecord, AddressLookup

__all__ = ["MemberEntry", "MembershipList", "StoreRecord", "AddressLookup"]
