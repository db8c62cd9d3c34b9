import sys

import atheris

with atheris.instrument_imports():
    from sven.models import DecodeError, DeskCommand, DeskState, decode_status


def TestOneInput(data: bytes) -> None:
    """Fuzz the inbound payload decoders; only DecodeError may escape them."""
    for decoder in (DeskState.from_json, DeskCommand.from_json, decode_status):
        try:
            decoder(data)
        except DecodeError:
            pass


def main() -> None:
    atheris.Setup(sys.argv, TestOneInput)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
