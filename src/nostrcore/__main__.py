"""Command-line interface over the nostrcore codecs and validators.

Every command writes JSON to stdout and returns exit code 0 on success,
1 on failure. Event and message arguments accept JSON text, or ``-`` to
read it from stdin.

Examples:
    ```bash
    nostrcore decode npub10elfcs4fr0l0r8af98jlmgdh9c8tcxjvz9qkw038js35mp4dma8qzvjptg
    nostrcore encode nprofile <pubkey> --relay wss://relay.example.com
    nostrcore id '{"pubkey": "...", "created_at": 1700000000, "kind": 1, ...}'
    nostrcore validate --as filter '{"kinds": [1], "since": 10, "until": 5}'
    nostrcore parse '["OK","<id>",true,""]'
    PRIVATE_KEY=nsec1... nostrcore sign - < unsigned.json
    nostrcore --config config/nostrcore.yaml --log-level DEBUG verify - < event.json
    ```
"""

import argparse
import json
import logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from nostrcore.core.config import CoreConfig
from nostrcore.core.exceptions import EncodingError, ErrorCode, EventError, NostrCoreError
from nostrcore.core.logger import Logger, StructuredFormatter
from nostrcore.models.event import Event
from nostrcore.nips.nip01 import compute_event_id, sign_event, verify_event
from nostrcore.nips.nip19 import Nip19Entity, Nip19Type, decode, encode, npub_encode, nsec_encode
from nostrcore.protocol.messages import parse_message
from nostrcore.protocol.validation import (
    ValidationResult,
    validate_event,
    validate_filter,
    validate_message,
    validate_signed_event,
    validate_subscription,
)
from nostrcore.utils.crypto import generate_key_pair
from nostrcore.utils.keys import ENV_PRIVATE_KEY, KeysConfig


logger = Logger("cli")

STDIN_MARKER = "-"
VALIDATION_TARGETS = ("signed-event", "event", "filter", "subscription", "message")


# =============================================================================
# Input / output helpers
# =============================================================================


def _read_input(value: str) -> str:
    return sys.stdin.read() if value == STDIN_MARKER else value


def _load_json(value: str) -> Any:
    try:
        return json.loads(_read_input(value))
    except json.JSONDecodeError as e:
        raise EncodingError(f"Invalid JSON input: {e}") from e


def _load_event(value: str) -> Event:
    data = _load_json(value)
    try:
        return Event.from_dict(data)
    except (TypeError, ValueError) as e:
        raise EventError(
            f"Invalid event: {e}", code=ErrorCode.EVENT_SERIALIZATION_FAILED
        ) from e


def _emit(value: Any) -> None:
    print(json.dumps(value, ensure_ascii=False))


def _entity_dict(entity: Nip19Entity) -> dict[str, Any]:
    result: dict[str, Any] = {"type": entity.type.value, "data": entity.data}
    if entity.relays:
        result["relays"] = list(entity.relays)
    for name in ("author", "kind", "identifier"):
        value = getattr(entity, name)
        if value is not None:
            result[name] = value
    return result


def _report(result: ValidationResult) -> int:
    _emit({"valid": result.is_valid, "errors": list(result.errors)})
    return 0 if result.is_valid else 1


# =============================================================================
# Commands
# =============================================================================


def cmd_decode(args: argparse.Namespace, config: CoreConfig) -> int:
    """Decode a NIP-19 string into its fields."""
    _emit(_entity_dict(decode(args.value.strip(), config=config.nip19)))
    return 0


def cmd_encode(args: argparse.Namespace, config: CoreConfig) -> int:
    """Encode hex data (or a relay URL) as a NIP-19 string."""
    entity = Nip19Entity(
        type=Nip19Type(args.type),
        data=args.data,
        relays=tuple(args.relay),
        author=args.author,
        kind=args.kind,
        identifier=args.identifier,
    )
    _emit(encode(entity, config=config.nip19))
    return 0


def cmd_id(args: argparse.Namespace, config: CoreConfig) -> int:
    """Print the canonical identifier of an event."""
    _emit(compute_event_id(_load_json(args.event)))
    return 0


def cmd_verify(args: argparse.Namespace, config: CoreConfig) -> int:
    """Check an event's id and signature."""
    valid = verify_event(_load_json(args.event))
    _emit({"valid": valid})
    return 0 if valid else 1


def cmd_validate(args: argparse.Namespace, config: CoreConfig) -> int:
    """Run the validation engine over an event, filter, subscription or message."""
    data = _load_json(args.input)
    limits = config.validation
    validators: dict[str, Callable[[Any], ValidationResult]] = {
        "signed-event": lambda d: validate_signed_event(d, limits=limits),
        "event": lambda d: validate_event(d, limits=limits),
        "filter": validate_filter,
        "subscription": validate_subscription,
        "message": lambda d: validate_message(d, limits=limits),
    }
    return _report(validators[args.target](data))


def cmd_parse(args: argparse.Namespace, config: CoreConfig) -> int:
    """Parse a relay wire message and print its normalized array."""
    message = parse_message(_read_input(args.message), lenient=not args.strict)
    _emit({"type": message.type.value, "message": message.to_list()})
    return 0


def cmd_sign(args: argparse.Namespace, config: CoreConfig) -> int:
    """Sign an event with the key held in an environment variable."""
    keys = KeysConfig(keys_env=args.keys_env)
    event = _load_event(args.event)
    signed = sign_event(event, keys.private_key_hex)
    logger.info("event_signed", id=signed.id, pubkey=signed.pubkey)
    _emit(signed.to_dict())
    return 0


def cmd_keygen(args: argparse.Namespace, config: CoreConfig) -> int:
    """Generate a new key pair."""
    pair = generate_key_pair()
    _emit(
        {
            "private_key": pair.private_key,
            "public_key": pair.public_key,
            "nsec": nsec_encode(pair.private_key, config=config.nip19),
            "npub": npub_encode(pair.public_key, config=config.nip19),
        }
    )
    return 0


COMMANDS: dict[str, Callable[[argparse.Namespace, CoreConfig], int]] = {
    "decode": cmd_decode,
    "encode": cmd_encode,
    "id": cmd_id,
    "verify": cmd_verify,
    "validate": cmd_validate,
    "parse": cmd_parse,
    "sign": cmd_sign,
    "keygen": cmd_keygen,
}


# =============================================================================
# Entry point
# =============================================================================


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="nostrcore",
        description="Nostr event, entity and relay message tools",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="YAML config path with validation limits and NIP-19 settings",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Log level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("decode", help="Decode a NIP-19 string")
    p.add_argument("value", help="npub/nsec/note/nprofile/nevent/naddr/nrelay string")

    p = sub.add_parser("encode", help="Encode a NIP-19 string")
    p.add_argument("type", choices=[t.value for t in Nip19Type], help="Entity type")
    p.add_argument("data", help="Hex key or id, or relay URL for nrelay")
    p.add_argument("--relay", action="append", default=[], help="Relay hint (repeatable)")
    p.add_argument("--author", help="Author pubkey (nevent)")
    p.add_argument("--kind", type=int, help="Event kind (nevent, naddr)")
    p.add_argument("--identifier", help="d tag value (naddr)")

    p = sub.add_parser("id", help="Compute an event id")
    p.add_argument("event", help="Event JSON, or - for stdin")

    p = sub.add_parser("verify", help="Verify an event id and signature")
    p.add_argument("event", help="Event JSON, or - for stdin")

    p = sub.add_parser("validate", help="Validate an event, filter, subscription or message")
    p.add_argument("input", help="JSON input, or - for stdin")
    p.add_argument(
        "--as",
        dest="target",
        choices=VALIDATION_TARGETS,
        default="signed-event",
        help="What the input is (default: signed-event)",
    )

    p = sub.add_parser("parse", help="Parse a relay wire message")
    p.add_argument("message", help="Message text, or - for stdin")
    p.add_argument("--strict", action="store_true", help="Require JSON input")

    p = sub.add_parser("sign", help="Sign an event with a key from the environment")
    p.add_argument("event", help="Event JSON, or - for stdin")
    p.add_argument(
        "--keys-env",
        default=ENV_PRIVATE_KEY,
        help=f"Environment variable holding the private key (default: {ENV_PRIVATE_KEY})",
    )

    sub.add_parser("keygen", help="Generate a key pair")

    return parser.parse_args(argv)


def setup_logging(level: str) -> None:
    """Configure the root logger with structured formatting.

    Installs a ``StructuredFormatter`` on a stderr handler so library debug
    output renders as ``level name message key=value ...``.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level))


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point: parse args, load config, and run the command."""
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        config = CoreConfig.from_yaml(args.config) if args.config else CoreConfig()
        return COMMANDS[args.command](args, config)
    except NostrCoreError as e:
        logger.error(f"{args.command}_failed", code=e.code, error=e.message)
        return 1
    except FileNotFoundError as e:
        logger.error("config_not_found", error=str(e))
        return 1


def cli() -> None:
    """Synchronous entry point for console_scripts."""
    sys.exit(main())


if __name__ == "__main__":
    cli()
