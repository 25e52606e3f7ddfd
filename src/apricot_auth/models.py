"""Base Pydantic models for apricot-auth.

All models in the package inherit from `AuthBaseModel`, which establishes a
consistent configuration:

- Strict field validation (no extra fields allowed)
- Immutable instances, safe to share across concurrent requests

Example:
    >>> from apricot_auth.models import AuthBaseModel
    >>>
    >>> class Grant(AuthBaseModel):
    ...     access_token: str
    >>>
    >>> Grant(access_token="abc").model_dump()
    {'access_token': 'abc'}
"""

from pydantic import BaseModel, ConfigDict


class AuthBaseModel(BaseModel):
    """Base model for all apricot-auth Pydantic models.

    - extra="forbid": Rejects any fields not defined in the model
    - frozen=True: Makes instances immutable

    Models mirroring upstream payloads override `extra` so unknown provider
    fields are ignored or preserved instead of rejected.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)
