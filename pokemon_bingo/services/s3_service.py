"""
Servicio de S3 y CloudFront para las pruebas de captura

Este servicio centraliza toda la lógica de interacción con AWS S3 y CloudFront.
Maneja dos modos de operación:
- Modo s3: lectura y escritura (las pruebas subidas se guardan en el bucket)
- Modo cache: solo lectura (nunca modifica S3, útil para staging/preview)

El backend genera "keys" (rutas dentro del bucket) y las convierte en URLs
públicas; si hay CloudFront configurado, las URLs salen de CloudFront.
"""

import re
import uuid
from io import BytesIO
from typing import Optional

import boto3

from pokemon_bingo.core.config import get_settings


class S3ServiceError(Exception):
    """Error base para excepciones del servicio S3"""
    pass


class S3NotConfiguredError(S3ServiceError):
    """Se intentó usar S3 sin configurar las credenciales necesarias"""
    pass


class S3WriteNotAllowedError(S3ServiceError):
    """Se intentó escribir en S3 estando en modo cache (solo lectura)"""
    pass


_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_filename(filename: Optional[str]) -> str:
    """
    Deja el nombre original apto para una key de S3

    "my catch (1).png" -> "my_catch_1_.png"
    """
    name = (filename or "").replace("\\", "/").split("/")[-1]
    name = _UNSAFE_CHARS.sub("_", name).strip("._")
    return name[:100] or "proof"


class S3Service:
    """
    Servicio para interactuar con AWS S3 y CloudFront

    Responsabilidades:
    - Generar keys únicas para las pruebas de captura
    - Subir las pruebas a S3 (solo en modo s3)
    - Generar las URLs públicas de cada prueba
    """

    def __init__(self):
        self.settings = get_settings()
        self._s3_client = None

        # Validar que el modo de almacenamiento sea válido
        if self.settings.storage_mode not in ["s3", "cache"]:
            raise ValueError(
                f"STORAGE_MODE inválido: {self.settings.storage_mode}. "
                "Debe ser 's3' o 'cache'"
            )

    @property
    def s3_client(self):
        """
        Cliente de S3 lazy-loaded

        Solo se inicializa cuando realmente se necesita, y se cachea para
        reutilizar la misma conexión. Lanza error si S3 no está configurado.
        """
        if self._s3_client is None:
            if not all([
                self.settings.aws_access_key_id,
                self.settings.aws_secret_access_key,
                self.settings.aws_s3_bucket
            ]):
                raise S3NotConfiguredError(
                    "S3 no está configurado. Faltan: AWS_ACCESS_KEY_ID, "
                    "AWS_SECRET_ACCESS_KEY o AWS_S3_BUCKET"
                )

            self._s3_client = boto3.client(
                's3',
                aws_access_key_id=self.settings.aws_access_key_id,
                aws_secret_access_key=self.settings.aws_secret_access_key,
                region_name=self.settings.aws_region
            )

        return self._s3_client

    @property
    def is_read_only(self) -> bool:
        """
        Indica si estamos en modo solo lectura (cache)

        En modo cache, NUNCA se debe escribir en S3.
        """
        return self.settings.storage_mode == "cache"

    def generate_proof_key(
        self,
        user_id: str,
        pokemon_id: int,
        filename: Optional[str],
        timestamp_ms: int
    ) -> str:
        """
        Genera la key S3 para una prueba de captura

        Naming convention:
        - {prefix}/{user_id}/{pokemon_id}-{timestamp_ms}-{uuid8}-{nombre}
        - Ejemplo: proofs/abc-123/25-1736900000000-1a2b3c4d-catch.png

        El sufijo aleatorio evita colisiones cuando dos archivos se suben en el
        mismo milisegundo con el mismo nombre.
        """
        prefix = self.settings.proof_key_prefix.strip("/")
        unique = uuid.uuid4().hex[:8]
        return f"{prefix}/{user_id}/{pokemon_id}-{timestamp_ms}-{unique}-{sanitize_filename(filename)}"

    async def upload_proof(
        self,
        s3_key: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        metadata: Optional[dict] = None
    ) -> str:
        """
        Sube una prueba a S3 y retorna su URL pública

        Raises:
            S3WriteNotAllowedError: Si estamos en modo cache (solo lectura)
            S3NotConfiguredError: Si S3 no está configurado
        """
        if self.is_read_only:
            raise S3WriteNotAllowedError(
                f"No se puede escribir en S3 en modo '{self.settings.storage_mode}'. "
                "Cambia STORAGE_MODE a 's3' para habilitar escritura."
            )

        upload_params = {
            "Bucket": self.settings.aws_s3_bucket,
            "Key": s3_key,
            "Body": BytesIO(data),
            "ContentType": content_type,
        }

        if metadata:
            upload_params["Metadata"] = metadata

        self.s3_client.put_object(**upload_params)
        return self.get_public_url(s3_key)

    async def delete_proof(self, s3_key: str) -> None:
        """
        Borra una prueba ya subida (por ejemplo si falló la segunda subida)

        Raises:
            S3WriteNotAllowedError: Si estamos en modo cache (solo lectura)
            S3NotConfiguredError: Si S3 no está configurado
        """
        if self.is_read_only:
            raise S3WriteNotAllowedError(
                f"No se puede borrar en S3 en modo '{self.settings.storage_mode}'."
            )

        self.s3_client.delete_object(Bucket=self.settings.aws_s3_bucket, Key=s3_key)

    def get_cloudfront_url(self, s3_key: str) -> Optional[str]:
        """
        Genera la URL pública de CloudFront para una key

        Returns:
            URL completa de CloudFront si está configurado, None si no
            Ej: "https://d6huioh3922nf.cloudfront.net/proofs/abc/25-...png"
        """
        if not self.is_cloudfront_configured():
            return None

        # Asegurar que el dominio no tenga https:// al inicio
        domain = self.settings.aws_cloudfront_domain.replace("https://", "").replace("http://", "")
        return f"https://{domain.rstrip('/')}/{s3_key}"

    def get_public_url(self, s3_key: str) -> str:
        """URL de CloudFront si existe, si no la URL directa del bucket"""
        cloudfront_url = self.get_cloudfront_url(s3_key)
        if cloudfront_url:
            return cloudfront_url

        return f"https://{self.settings.aws_s3_bucket}.s3.{self.settings.aws_region}.amazonaws.com/{s3_key}"

    def is_cloudfront_configured(self) -> bool:
        """
        Verifica si CloudFront está configurado correctamente

        Retorna False si:
        - No hay dominio configurado
        - El dominio es el de ejemplo
        """
        if not self.settings.aws_cloudfront_domain:
            return False

        # Dominios de ejemplo que no deben usarse
        example_domains = [
            "d111111abcdef8.cloudfront.net",
            "dXXXXXXXXXXXXX.cloudfront.net",
            "example.cloudfront.net",
        ]

        domain = self.settings.aws_cloudfront_domain.replace("https://", "").replace("http://", "")
        return domain not in example_domains


# Instancia singleton del servicio
_s3_service_instance: Optional[S3Service] = None


def get_s3_service() -> S3Service:
    """
    Retorna la instancia singleton del servicio S3

    Usamos singleton para reutilizar la conexión a S3 y mantener la misma
    configuración en toda la app.
    """
    global _s3_service_instance
    if _s3_service_instance is None:
        _s3_service_instance = S3Service()
    return _s3_service_instance
