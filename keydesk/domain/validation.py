"""Política de validación de entidades.

Se construye explícitamente y se inyecta en los casos de uso, de modo que las
pruebas pueden usar reglas propias sin estado global.
"""

import re
import unicodedata
from dataclasses import dataclass, field

from keydesk.domain.errors import ValidationError

DEFAULT_USER_NAME_PATTERN = r"^[a-zA-ZÀ-ú0-9\s]{2,100}$"
DEFAULT_EMAIL_PATTERN = r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$"


@dataclass(frozen=True)
class ValidationPolicy:
    """
    Reglas de validación para llaves y usuarios.

    Attributes:
        name_min_length: Longitud mínima de nombres (llave y usuario).
        name_max_length: Longitud máxima de nombres.
        description_max_length: Longitud máxima de la descripción de una llave.
        password_min_length: Longitud mínima de contraseña.
        password_max_bytes: Límite de bcrypt, en bytes UTF-8.
        user_name_pattern: Regex de caracteres permitidos en nombres de usuario.
        email_pattern: Regex de formato de email.
    """

    name_min_length: int = 2
    name_max_length: int = 100
    description_max_length: int = 500
    password_min_length: int = 8
    password_max_bytes: int = 72
    user_name_pattern: str = DEFAULT_USER_NAME_PATTERN
    email_pattern: str = DEFAULT_EMAIL_PATTERN

    _user_name_re: re.Pattern = field(init=False, repr=False, compare=False)
    _email_re: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_user_name_re", re.compile(self.user_name_pattern))
        object.__setattr__(self, "_email_re", re.compile(self.email_pattern))

    def validate_key_name(self, name: str) -> None:
        length = len(name.strip()) if name else 0
        if length < self.name_min_length or length > self.name_max_length:
            raise ValidationError(
                "name",
                f"debe tener entre {self.name_min_length} y {self.name_max_length} caracteres",
            )

    def validate_description(self, description: str) -> None:
        if len(description or "") > self.description_max_length:
            raise ValidationError(
                "description",
                f"no puede exceder {self.description_max_length} caracteres",
            )

    def validate_user_name(self, name: str) -> None:
        if not name or not self._user_name_re.match(name):
            raise ValidationError(
                "name",
                "debe contener solo letras, números y espacios "
                f"({self.name_min_length}-{self.name_max_length} caracteres)",
            )

    def validate_email(self, email: str) -> None:
        if not email or not self._email_re.match(email):
            raise ValidationError("email", "formato de email inválido")

    def validate_password(self, password: str) -> None:
        """
        Verifica los requisitos mínimos de seguridad de la contraseña.

        Requiere longitud mínima y al menos una mayúscula, una minúscula,
        un dígito y un carácter especial (puntuación o símbolo).
        """
        if not password or len(password) < self.password_min_length:
            raise ValidationError(
                "password",
                f"debe tener al menos {self.password_min_length} caracteres",
            )
        if len(password.encode("utf-8")) > self.password_max_bytes:
            raise ValidationError(
                "password",
                f"no puede exceder {self.password_max_bytes} bytes",
            )

        has_upper = has_lower = has_digit = has_special = False
        for char in password:
            if char.isupper():
                has_upper = True
            elif char.islower():
                has_lower = True
            elif char.isdigit():
                has_digit = True
            elif unicodedata.category(char)[0] in ("P", "S"):
                has_special = True

        if not (has_upper and has_lower and has_digit and has_special):
            raise ValidationError(
                "password",
                "debe contener al menos una mayúscula, una minúscula, "
                "un número y un carácter especial",
            )
