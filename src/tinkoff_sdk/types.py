from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

API_V2_BASE_URL = "https://securepay.tinkoff.ru/v2"


@dataclass(frozen=True)
class Credentials:
    terminal_key: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(terminal_key={self.terminal_key!r}, password='***')"


class PaymentStatus:
    NEW = "NEW"
    FORM_SHOWED = "FORM_SHOWED"
    DEADLINE_EXPIRED = "DEADLINE_EXPIRED"
    CANCELED = "CANCELED"
    PREAUTHORIZING = "PREAUTHORIZING"
    AUTHORIZING = "AUTHORIZING"
    AUTHORIZED = "AUTHORIZED"
    AUTH_FAIL = "AUTH_FAIL"
    REJECTED = "REJECTED"
    THREE_DS_CHECKING = "3DS_CHECKING"
    THREE_DS_CHECKED = "3DS_CHECKED"
    REVERSING = "REVERSING"
    PARTIAL_REVERSED = "PARTIAL_REVERSED"
    REVERSED = "REVERSED"
    CONFIRMING = "CONFIRMING"
    CONFIRMED = "CONFIRMED"
    REFUNDING = "REFUNDING"
    PARTIAL_REFUNDED = "PARTIAL_REFUNDED"
    REFUNDED = "REFUNDED"


class PayType:
    ONE_STAGE = "O"
    TWO_STAGE = "T"


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ReceiptItem(WireModel):
    name: str = Field(alias="Name")
    price: int = Field(alias="Price", ge=0)  # kopecks
    quantity: float = Field(alias="Quantity", gt=0)
    amount: int = Field(alias="Amount", ge=0)  # kopecks
    tax: str = Field(alias="Tax")
    ean13: str = Field(default="", alias="Ean13")
    shop_code: str = Field(default="", alias="ShopCode")


class Receipt(WireModel):
    email: str = Field(default="", alias="Email")
    phone: str = Field(default="", alias="Phone")
    email_company: str = Field(default="", alias="EmailCompany")
    taxation: str = Field(alias="Taxation")
    items: list[ReceiptItem] = Field(default_factory=list, alias="Items")
