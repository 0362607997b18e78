"""Excepciones de dominio para el sistema de reserva de llaves."""


class DomainError(Exception):
    """Clase base para todos los errores de dominio."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


# === Errores de entidad inexistente ===


class NotFoundError(DomainError):
    """La entidad referenciada no existe."""


class KeyNotFoundError(NotFoundError):
    """La llave no existe."""

    def __init__(self, key_id: str):
        super().__init__(message=f"Llave no encontrada: {key_id}", code="KEY_NOT_FOUND")
        self.key_id = key_id


class UserNotFoundError(NotFoundError):
    """El usuario no existe."""

    def __init__(self, user_id: str):
        super().__init__(message=f"Usuario no encontrado: {user_id}", code="USER_NOT_FOUND")
        self.user_id = user_id


class ReservationNotFoundError(NotFoundError):
    """La reservación no existe."""

    def __init__(self, reservation_id: str):
        super().__init__(
            message=f"Reservación no encontrada: {reservation_id}",
            code="RESERVATION_NOT_FOUND",
        )
        self.reservation_id = reservation_id


# === Errores de unicidad ===


class AlreadyExistsError(DomainError):
    """Un campo único ya está en uso."""


class KeyAlreadyExistsError(AlreadyExistsError):
    """Ya existe una llave con ese nombre."""

    def __init__(self, name: str):
        super().__init__(
            message=f"Ya existe una llave con nombre: {name}",
            code="KEY_ALREADY_EXISTS",
        )
        self.name = name


class UserAlreadyExistsError(AlreadyExistsError):
    """Ya existe un usuario con ese email."""

    def __init__(self, email: str):
        super().__init__(
            message=f"Ya existe un usuario con email: {email}",
            code="USER_ALREADY_EXISTS",
        )
        self.email = email


# === Errores de autenticación / autorización ===


class UnauthorizedError(DomainError):
    """El solicitante no tiene el rol o la propiedad requerida."""

    def __init__(self, operation: str):
        super().__init__(
            message=f"No autorizado para {operation}",
            code="UNAUTHORIZED",
        )
        self.operation = operation


class InvalidCredentialsError(DomainError):
    """Email o contraseña inválidos (no distingue cuál)."""

    def __init__(self):
        super().__init__(message="Credenciales inválidas", code="INVALID_CREDENTIALS")


class InvalidTokenError(DomainError):
    """El token bearer es inválido o expiró."""

    def __init__(self, reason: str = "token inválido"):
        super().__init__(message=f"Token rechazado: {reason}", code="INVALID_TOKEN")
        self.reason = reason


class UserBlockedError(DomainError):
    """El usuario está bloqueado."""

    def __init__(self, user_id: str):
        super().__init__(message=f"Usuario bloqueado: {user_id}", code="USER_BLOCKED")
        self.user_id = user_id


class UserAlreadyBlockedError(DomainError):
    def __init__(self, user_id: str):
        super().__init__(
            message=f"El usuario {user_id} ya está bloqueado",
            code="USER_ALREADY_BLOCKED",
        )
        self.user_id = user_id


class UserNotBlockedError(DomainError):
    def __init__(self, user_id: str):
        super().__init__(
            message=f"El usuario {user_id} no está bloqueado",
            code="USER_NOT_BLOCKED",
        )
        self.user_id = user_id


# === Errores de llave ===


class KeyInactiveError(DomainError):
    """La llave está inactiva y no puede reservarse."""

    def __init__(self, key_id: str):
        super().__init__(message=f"La llave {key_id} está inactiva", code="KEY_INACTIVE")
        self.key_id = key_id


class KeyReservedError(DomainError):
    """La llave ya tiene una reservación activa."""

    def __init__(self, key_id: str):
        super().__init__(message=f"La llave {key_id} ya está reservada", code="KEY_RESERVED")
        self.key_id = key_id


class KeyHasActiveReservationError(DomainError):
    """No se puede eliminar una llave con reservación activa."""

    def __init__(self, key_id: str):
        super().__init__(
            message=f"No se puede eliminar la llave {key_id}: tiene una reservación activa",
            code="KEY_HAS_ACTIVE_RESERVATION",
        )
        self.key_id = key_id


# === Errores de reservación ===


class ReservationAlreadyExistsError(DomainError):
    """El usuario ya tiene una reservación activa."""

    def __init__(self, user_id: str):
        super().__init__(
            message=f"El usuario {user_id} ya tiene una reservación activa",
            code="RESERVATION_ALREADY_EXISTS",
        )
        self.user_id = user_id


class ReservationNotActiveError(DomainError):
    """La reservación no está activa."""

    def __init__(self, reservation_id: str | None, current_status: str):
        super().__init__(
            message=f"La reservación {reservation_id} no está activa: estado actual '{current_status}'",
            code="RESERVATION_NOT_ACTIVE",
        )
        self.reservation_id = reservation_id
        self.current_status = current_status


class CannotExtendReservationError(DomainError):
    def __init__(self, reservation_id: str | None, current_status: str):
        super().__init__(
            message=f"No se puede extender la reservación {reservation_id}: "
            f"estado actual '{current_status}'",
            code="CANNOT_EXTEND_RESERVATION",
        )
        self.reservation_id = reservation_id
        self.current_status = current_status


# === Errores de concurrencia ===


class ConcurrentModificationError(DomainError):
    """Conflicto de concurrencia al actualizar una entidad."""

    def __init__(self, entity: str, entity_id: str | None, expected_version: int):
        super().__init__(
            message=f"Conflicto de concurrencia en {entity} {entity_id}: "
            f"versión esperada {expected_version}",
            code="CONCURRENT_MODIFICATION",
        )
        self.entity = entity
        self.entity_id = entity_id
        self.expected_version = expected_version


# === Errores de validación ===


class ValidationError(DomainError):
    """Error de validación de datos de entrada."""

    def __init__(self, field: str, message: str):
        super().__init__(
            message=f"Validación fallida en '{field}': {message}",
            code="VALIDATION_ERROR",
        )
        self.field = field


class InvalidDueTimeError(ValidationError):
    """La nueva fecha de vencimiento es anterior a la actual."""

    def __init__(self, message: str):
        super().__init__(field="due_at", message=message)
        self.code = "INVALID_DUE_TIME"


# === Errores internos ===


class InternalError(DomainError):
    """Fallo no clasificado de almacenamiento o infraestructura."""

    def __init__(self, message: str = "Error interno", code: str = "INTERNAL_ERROR"):
        super().__init__(message=message, code=code)


class StorageError(InternalError):
    """El almacenamiento falló al ejecutar una operación."""

    def __init__(self, operation: str):
        super().__init__(
            message=f"Fallo de almacenamiento durante {operation}",
            code="STORAGE_ERROR",
        )
        self.operation = operation


class CascadeError(DomainError):
    """Un paso de una operación en cascada falló; los pasos previos quedan aplicados."""

    def __init__(self, step: str, entity_id: str | None):
        super().__init__(
            message=f"Falló el paso '{step}' de la cascada para {entity_id}",
            code="CASCADE_FAILED",
        )
        self.step = step
        self.entity_id = entity_id


class OverdueProcessingError(DomainError):
    """El barrido de reservaciones vencidas se interrumpió."""

    def __init__(self, reservation_id: str | None, user_id: str, step: str):
        super().__init__(
            message=f"Falló '{step}' al procesar la reservación vencida {reservation_id} "
            f"del usuario {user_id}",
            code="OVERDUE_PROCESSING_FAILED",
        )
        self.reservation_id = reservation_id
        self.user_id = user_id
        self.step = step
