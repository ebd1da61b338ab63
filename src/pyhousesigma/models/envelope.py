"""Wire envelope for encrypted requests."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class EncryptedEnvelope(BaseModel):
    """JSON body of an encrypted request.

    Parameters
    ----------
    ctr : str
        Base64 of the RSA-OAEP-wrapped 16-byte AES counter.
    et_payload : str
        Base64 of the AES-CTR ciphertext of the timestamped JSON body.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    ctr: str
    et_payload: str

    def as_body(self) -> dict[str, str]:
        return {"ctr": self.ctr, "et_payload": self.et_payload}
