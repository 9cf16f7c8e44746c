"""
End-user models.

Email and Password are value types: constructing one runs the validation
rules and raises ValidationError listing every violated rule, so an invalid
value never reaches the user-creation call.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

from ..utils.validation import raise_for_violations, validate_email, validate_password


def _unwrap(data: Any) -> Any:
    # Email("x") and Email(value="x") are both accepted
    if isinstance(data, str):
        return {"value": data}
    return data


class Email(BaseModel):
    """Validated, lower-cased email address."""

    model_config = {"frozen": True}

    value: str

    def __init__(self, value: str | None = None, **data: Any) -> None:
        if value is not None:
            data["value"] = value
        super().__init__(**data)

    @model_validator(mode="before")
    @classmethod
    def check_format(cls, data: Any) -> Any:
        data = _unwrap(data)
        if isinstance(data, dict):
            raw = data.get("value") or ""
            raise_for_violations(validate_email(raw), ["email"])
            data = {**data, "value": raw.lower()}
        return data

    def __str__(self) -> str:
        return self.value


class Password(BaseModel):
    """Validated password. The value is hidden from repr and str."""

    model_config = {"frozen": True}

    value: str = Field(..., repr=False)

    def __init__(self, value: str | None = None, **data: Any) -> None:
        if value is not None:
            data["value"] = value
        super().__init__(**data)

    @model_validator(mode="before")
    @classmethod
    def check_strength(cls, data: Any) -> Any:
        data = _unwrap(data)
        if isinstance(data, dict):
            raise_for_violations(validate_password(data.get("value") or ""), ["password"])
        return data

    def __str__(self) -> str:
        return "********"


class CredentialRepresentation(BaseModel):
    """Credential attached to a new user."""

    model_config = {"populate_by_name": True}

    type: Literal["password"] = "password"
    value: str
    temporary: bool = False


class UserRepresentation(BaseModel):
    """User payload for the admin users endpoint."""

    model_config = {"populate_by_name": True}

    username: str
    enabled: bool = True
    first_name: str | None = Field(None, alias="firstName")
    last_name: str | None = Field(None, alias="lastName")
    email: str | None = None
    credentials: list[CredentialRepresentation] = Field(default_factory=list)

    @classmethod
    def with_password(
        cls,
        username: str,
        first_name: str,
        last_name: str,
        email: Email,
        password: Password,
    ) -> "UserRepresentation":
        """Build an enabled user holding one non-temporary password credential."""
        return cls(
            username=username,
            first_name=first_name,
            last_name=last_name,
            email=email.value,
            credentials=[CredentialRepresentation(value=password.value)],
        )


class InitialUser(BaseModel):
    """User created as the last stage of workspace provisioning."""

    model_config = {"populate_by_name": True}

    username: str
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    email: Email
    password: Password
