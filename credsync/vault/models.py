"""
Credential record shapes carried in the sync secret.

Each source entry is a JSON document. Field names follow the producers of
that secret, including the ``credIndetifier`` / ``certIndetifier`` spelling.
Missing or null fields decode as empty and are caught by ``missing_fields()``;
wrongly typed fields fail decoding.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

# Source secret key prefixes
SERVICE_CRED_PREFIX = "SERVICE-CRED"
CERTS_PREFIX = "CERTS"
GENERIC_PREFIX = "GENERIC"

CA_DATA_KEY = "ca.pem"
CERT_DATA_KEY = "cert.crt"
KEY_DATA_KEY = "key.key"
USER_NAME_KEY = "userName"
PASSWORD_KEY = "password"


class _RecordBase(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    # (attribute name, wire name) pairs that must be non-empty
    required_fields: ClassVar[tuple[tuple[str, str], ...]] = ()

    def missing_fields(self) -> list[str]:
        """Wire names of required fields that are empty."""
        return [wire for attr, wire in self.required_fields if not getattr(self, attr)]

    @field_validator("*", mode="before")
    @classmethod
    def null_as_empty(cls, value, info: ValidationInfo):
        # JSON null reads as the field's empty value, in maps too
        if value is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        if isinstance(value, dict):
            return {k: "" if v is None else v for k, v in value.items()}
        return value


class ServiceCredential(_RecordBase):
    """Username/password pair plus free-form extra attributes."""

    entity_name: str = Field("", alias="entityName")
    cred_identifier: str = Field("", alias="credIndetifier")
    user_name: str = Field("", alias="userName")
    password: str = ""
    additional_data: dict[str, str] = Field(default_factory=dict, alias="additionalData")

    required_fields: ClassVar[tuple[tuple[str, str], ...]] = (
        ("user_name", "userName"),
        ("password", "password"),
        ("entity_name", "entityName"),
        ("cred_identifier", "credIndetifier"),
    )

    @property
    def identifier(self) -> str:
        return self.cred_identifier

    @property
    def path_prefix(self) -> str:
        return SERVICE_CRED_PREFIX.lower()

    def attributes(self) -> dict[str, str]:
        cred = {USER_NAME_KEY: self.user_name, PASSWORD_KEY: self.password}
        # additionalData wins on collision
        cred.update(self.additional_data)
        return cred


class CertificateData(_RecordBase):
    """A TLS bundle: CA certificate, leaf certificate and private key."""

    entity_name: str = Field("", alias="entityName")
    cert_identifier: str = Field("", alias="certIndetifier")
    ca_cert: str = Field("", alias="caCert")
    key: str = ""
    cert: str = ""

    required_fields: ClassVar[tuple[tuple[str, str], ...]] = (
        ("ca_cert", "caCert"),
        ("cert", "cert"),
        ("key", "key"),
        ("entity_name", "entityName"),
        ("cert_identifier", "certIndetifier"),
    )

    @property
    def identifier(self) -> str:
        return self.cert_identifier

    @property
    def path_prefix(self) -> str:
        return CERTS_PREFIX.lower()

    def attributes(self) -> dict[str, str]:
        return {
            CA_DATA_KEY: self.ca_cert,
            CERT_DATA_KEY: self.cert,
            KEY_DATA_KEY: self.key,
        }


class GenericCredential(_RecordBase):
    """Arbitrary key/value credential filed under its own type."""

    credential_type: str = Field("", alias="credentialType")
    entity_name: str = Field("", alias="entityName")
    cred_identifier: str = Field("", alias="credIndetifier")
    credential: dict[str, str] = Field(default_factory=dict)

    required_fields: ClassVar[tuple[tuple[str, str], ...]] = (
        ("entity_name", "entityName"),
        ("cred_identifier", "credIndetifier"),
        ("credential_type", "credentialType"),
    )

    @property
    def identifier(self) -> str:
        return self.cred_identifier

    @property
    def path_prefix(self) -> str:
        return self.credential_type

    def attributes(self) -> dict[str, str]:
        return dict(self.credential)


CredentialRecord = ServiceCredential | CertificateData | GenericCredential
