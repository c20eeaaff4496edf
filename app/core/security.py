from typing import Optional
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError
from fastapi.security import HTTPBearer
from app.core.config import settings
import structlog

logger = structlog.get_logger()

# auto_error is off so that handlers which never need the caller (update
# without `checked`) still work without a credential.
bearer_scheme = HTTPBearer(auto_error=False)


class CredentialError(Exception):
    message = "Não foi possível validar as credenciais."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)


class MissingCredentialError(CredentialError):
    message = "Token de autorização não informado."


class MalformedCredentialError(CredentialError):
    message = "Token de autorização inválido."


class ExpiredCredentialError(CredentialError):
    message = "Token de autorização expirado."


class TokenParser:
    """Decodes bearer tokens into the id of the authenticated user."""

    def __init__(
        self,
        secret_key: str = "",
        algorithm: str = "HS256",
        verify_signature: bool = False,
        user_id_claim: str = "userId",
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.verify_signature = verify_signature
        self.user_id_claim = user_id_claim

    def parse(self, credential: Optional[str]) -> str:
        if not credential:
            raise MissingCredentialError()

        # Accept a raw header value as well as the bare token.
        token = credential.strip()
        if token.lower().startswith("bearer "):
            token = token[7:].strip()

        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_signature": self.verify_signature, "verify_aud": False},
            )
        except ExpiredSignatureError as e:
            logger.warning("Expired token", error=str(e))
            raise ExpiredCredentialError()
        except JWTError as e:
            logger.warning("JWT decode error", error=str(e))
            raise MalformedCredentialError()

        user_id = payload.get(self.user_id_claim)
        if not user_id:
            logger.warning("Token missing user id claim", claim=self.user_id_claim)
            raise MalformedCredentialError()
        return str(user_id)


token_parser = TokenParser(
    secret_key=settings.jwt_secret_key,
    algorithm=settings.jwt_algorithm,
    verify_signature=settings.jwt_verify_signature,
    user_id_claim=settings.jwt_user_id_claim,
)
