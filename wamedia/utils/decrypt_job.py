"""Decrypt an `.enc` file on disk."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from wamedia.client.media import MediaDecryptor
from wamedia.core.entities import DecryptedMedia
from wamedia.defaults.config import DecryptOptions, options_from_env

logger = logging.getLogger(__name__)


@dataclass
class DecryptJob:
    input_path: str
    media_key: str
    output_path: Optional[str] = None
    content_type: Optional[str] = None
    kind: Optional[str] = None
    enc_sha256: Optional[str] = None
    options: DecryptOptions = field(default_factory=options_from_env)


def default_output_path(input_path: str) -> str:
    path = Path(input_path)
    if path.suffix == ".enc":
        return str(path.with_suffix(""))
    return str(path.with_name(path.name + ".dec"))


def run_decrypt_job(job: DecryptJob) -> DecryptedMedia:
    encrypted = Path(job.input_path).read_bytes()
    decryptor = MediaDecryptor(job.options)
    result = decryptor.decrypt_bytes(
        encrypted,
        job.media_key,
        job.content_type,
        kind=job.kind,
        enc_sha256=job.enc_sha256,
    )

    output_path = job.output_path or default_output_path(job.input_path)
    Path(output_path).write_bytes(result.data)
    logger.info(
        "decrypted %d bytes (%s, mac=%s)",
        len(result),
        result.content_type,
        result.status.value,
        extra={"event": "media_decrypted", "media_kind": result.kind.value, "path": output_path},
    )
    return result
