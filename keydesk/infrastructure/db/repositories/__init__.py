from keydesk.infrastructure.db.repositories.key_repo_sql import KeyRepoSQL
from keydesk.infrastructure.db.repositories.reservation_repo_sql import ReservationRepoSQL
from keydesk.infrastructure.db.repositories.user_repo_sql import UserRepoSQL

__all__ = ["KeyRepoSQL", "ReservationRepoSQL", "UserRepoSQL"]
