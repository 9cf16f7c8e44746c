"""
Command objects accepted by the handlers.

Commands are plain data carriers. They are not validated beyond their shape;
the handlers build the validated value types (Email, Password) from them
before anything touches the network.
"""

from pydantic import BaseModel, Field


class CreateWorkspaceCommand(BaseModel):
    """Provision a new workspace realm named after the domain."""

    model_config = {"populate_by_name": True}

    domain_name: str = Field(..., alias="domainName")


class CreateUserCommand(BaseModel):
    """Create an end-user account inside an existing workspace realm."""

    model_config = {"populate_by_name": True}

    realm_name: str = Field(..., alias="realmName")
    username: str
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    email: str
    password: str = Field(..., repr=False)


class LoginUserCommand(BaseModel):
    """Authenticate an end user against a workspace realm."""

    model_config = {"populate_by_name": True}

    username: str
    password: str = Field(..., repr=False)
    realm_name: str = Field(..., alias="realmName")
