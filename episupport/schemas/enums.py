from enum import Enum

# ------------------ USER ROLES ------------------
class UserRole(str, Enum):
    MONITORED = "epilepsy"
    SUPPORT = "support"

    @classmethod
    def _missing_(cls, value):
        # Mobile client sends "EPILEPSY" / "epilepsy"; accept "monitored" too
        if isinstance(value, str):
            s = value.strip().lower()
            if s == "monitored":
                return cls.MONITORED
            for member in cls:
                if member.value == s:
                    return member
        return None


# ------------------ PUSH DELIVERY ------------------
class DeliveryStatus(str, Enum):
    DELIVERED = "delivered"
    FAILED = "failed"
