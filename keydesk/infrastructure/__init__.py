"""
Capa de Infraestructura - adaptadores de los puertos de aplicación.

Estructura:
- in_memory/: Repositorios en memoria (testing, modo sin base de datos)
- db/: Repositorios SQLAlchemy Core sobre engine async
- security/: Hash de contraseñas (bcrypt) y tokens JWT (python-jose)
- messaging/: Worker periódico de reservaciones vencidas
"""
