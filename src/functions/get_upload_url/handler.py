import boto3
import json
import logging
import os
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger()
logger.setLevel(logging.INFO)

UPLOAD_URL_EXPIRES_IN = 3600
MISSING_OBJECT_NAME = "Missing required query parameter 'object_name'"


@dataclass(frozen=True)
class UploadConfig:
    bucket: Optional[str]
    expires_in: int = UPLOAD_URL_EXPIRES_IN

    @classmethod
    def from_env(cls, environ=None) -> "UploadConfig":
        # BUCKET_NAME is passed via Terraform; an unset value fails at signing time
        environ = os.environ if environ is None else environ
        return cls(bucket=environ.get("BUCKET_NAME"))


@dataclass(frozen=True)
class SigningResult:
    url: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def get_object_name(event) -> Optional[str]:
    # Direct invokes can send a null payload or a non-object query string
    qs = event.get("queryStringParameters") if isinstance(event, dict) else None
    if not isinstance(qs, dict):
        return None
    return qs.get("object_name") or None


def _resp(status: int, body: dict):
    return {
        "statusCode": status,
        "headers": {
            "Content-Type": "application/json",
            "Access-Control-Allow-Origin": "*",
        },
        "body": json.dumps(body, separators=(",", ":")),
    }


class UploadUrlIssuer:
    """Issues presigned PUT URLs for objects in a single bucket.

    The S3 client holds no per-request state, so one issuer is shared by
    every invocation of a warm container.
    """

    def __init__(self, config: UploadConfig, s3_client):
        self.config = config
        self.s3 = s3_client

    def sign(self, object_name: str) -> SigningResult:
        try:
            url = self.s3.generate_presigned_url(
                "put_object",
                Params={"Bucket": self.config.bucket, "Key": object_name},
                ExpiresIn=self.config.expires_in,
            )
        except Exception as e:
            logger.exception("Failed to sign upload URL for s3://%s/%s", self.config.bucket, object_name)
            return SigningResult(error=str(e))
        return SigningResult(url=url)

    def issue(self, event: dict) -> dict:
        object_name = get_object_name(event)
        if object_name is None:
            logger.warning(MISSING_OBJECT_NAME)
            return _resp(400, {"error": MISSING_OBJECT_NAME})

        result = self.sign(object_name)
        if not result.ok:
            return _resp(400, {"error": result.error})

        logger.info("Issued upload URL for s3://%s/%s", self.config.bucket, object_name)
        return _resp(200, {"upload_url": result.url})


# Reuse the client across invocations
s3 = boto3.client("s3")
issuer = UploadUrlIssuer(UploadConfig.from_env(), s3)


def lambda_handler(event, context):
    return issuer.issue(event)
