"""Decrypt a downloaded `.enc` media file.

Usage examples:
  python scripts/decrypt_media.py photo.enc --key <base64 mediaKey> --mimetype image/jpeg
  python scripts/decrypt_media.py sticker.enc --key <base64 mediaKey> --kind sticker --out sticker.webp

Environment fallbacks:
  WAMEDIA_MEDIA_KEY
  WAMEDIA_STRICT_MAC
"""

from __future__ import annotations

import argparse
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from wamedia.core.entities import MediaKind  # noqa: E402
from wamedia.core.errors import WamediaError  # noqa: E402
from wamedia.defaults.config import options_from_env  # noqa: E402
from wamedia.infra.logger import get_logger  # noqa: E402
from wamedia.utils.decrypt_job import DecryptJob, run_decrypt_job  # noqa: E402


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Decrypt WhatsApp .enc media.")
    parser.add_argument("input", help="Path to the encrypted .enc file")
    parser.add_argument("--key", help="Base64 mediaKey (32 bytes)")
    parser.add_argument("--mimetype", help="Content type of the plaintext, e.g. image/jpeg")
    parser.add_argument("--kind", choices=[kind.value for kind in MediaKind], help="Force media kind")
    parser.add_argument("--enc-sha256", help="Base64 fileEncSha256 for a diagnostic digest check")
    parser.add_argument("--out", help="Output path (default: input without .enc)")
    parser.add_argument("--lenient", action="store_true", help="Decrypt even if the media MAC mismatches")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logger = get_logger("wamedia")

    media_key = args.key or os.getenv("WAMEDIA_MEDIA_KEY")
    if not media_key:
        print("[decrypt] FAILED: no media key (use --key or WAMEDIA_MEDIA_KEY)")
        return 1

    options = options_from_env()
    if args.lenient:
        options = replace(options, strict_mac=False)

    job = DecryptJob(
        input_path=args.input,
        media_key=media_key,
        output_path=args.out,
        content_type=args.mimetype,
        kind=args.kind,
        enc_sha256=args.enc_sha256,
        options=options,
    )
    try:
        result = run_decrypt_job(job)
    except (WamediaError, OSError) as exc:
        logger.error("decryption failed: %s", exc, extra={"event": "decrypt_failed", "path": args.input})
        print(f"[decrypt] FAILED: {exc}")
        return 1

    print(f"[decrypt] OK {len(result)} bytes {result.content_type} mac={result.status.value}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
