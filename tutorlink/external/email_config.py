"""
Configuración para enviar correos electrónicos usando FastAPI-Mail.
Carga los parámetros desde la configuración global de la aplicación.
"""

from fastapi_mail import ConnectionConfig, FastMail
from tutorlink.configs.settings import settings


"""
Configura la conexión al servidor SMTP con las credenciales y parámetros de seguridad.
  - Si MAIL_ENABLED es falso los mensajes se construyen pero no se envían.
  - Las credenciales solo se usan cuando hay usuario configurado.
"""
conf = ConnectionConfig(
    MAIL_USERNAME=settings.MAIL_USERNAME,
    MAIL_PASSWORD=settings.MAIL_PASSWORD,
    MAIL_FROM=settings.MAIL_FROM,
    MAIL_FROM_NAME=settings.MAIL_FROM_NAME,
    MAIL_PORT=settings.MAIL_PORT,
    MAIL_SERVER=settings.MAIL_SERVER,
    MAIL_STARTTLS=settings.MAIL_STARTTLS,
    MAIL_SSL_TLS=settings.MAIL_SSL_TLS,
    USE_CREDENTIALS=bool(settings.MAIL_USERNAME),
    VALIDATE_CERTS=True,
    SUPPRESS_SEND=0 if settings.MAIL_ENABLED else 1,
)

fast_mail = FastMail(conf)
