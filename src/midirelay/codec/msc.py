"""MIDI Show Control (MSC) encoding.

MSC messages are universal real-time sysex messages:

    F0 7F <device id> 02 <command format> <command> <data...> F7

Cue data is ASCII. The cue number comes first, the cue list and cue path
follow, each preceded by a 0x00 delimiter.
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)

SYSEX_START = 0xF0
SYSEX_END = 0xF7
UNIVERSAL_REAL_TIME = 0x7F
MSC_SUB_ID = 0x02

ALL_CALL = 0x7F  # Broadcast device id
GROUP_BASE = 0x70  # Group 1 device id, groups run 0x70-0x7E
MAX_INDIVIDUAL_ID = 111

COMMAND_FORMATS: dict[str, int] = {
    "lighting.general": 0x01,
    "sound.general": 0x10,
    "machinery.general": 0x20,
    "video.general": 0x30,
    "projection.general": 0x40,
    "processcontrol.general": 0x50,
    "pyro.general": 0x60,
}
ALL_TYPES = 0x7F

COMMANDS: dict[str, int] = {
    "go": 0x01,
    "stop": 0x02,
    "resume": 0x03,
    "timedgo": 0x04,
    "load": 0x05,
    "set": 0x06,
    "fire": 0x07,
    "alloff": 0x08,
    "restore": 0x09,
    "reset": 0x0A,
    "gooff": 0x0B,
    "gojam": 0x10,
}
DEFAULT_COMMAND = COMMANDS["go"]


def resolve_device_id(device_id: int | str | None) -> int:
    """
    Resolve an MSC device id.

    Integers 0-111 address a single device, "g1".."g15" address a group and
    "all" broadcasts. Anything else falls back to broadcast.
    """
    if isinstance(device_id, bool):
        device_id = None

    number: Optional[int] = None
    if isinstance(device_id, int):
        number = device_id
    elif isinstance(device_id, str):
        text = device_id.strip().lower()
        try:
            number = int(text)
        except ValueError:
            if text == "all":
                return ALL_CALL
            if text.startswith("g"):
                try:
                    group = int(text[1:])
                except ValueError:
                    group = 0
                if 1 <= group <= 15:
                    return GROUP_BASE + (group - 1)

    if number is not None and 0 <= number <= MAX_INDIVIDUAL_ID:
        return number

    logger.warning(f"MSC device id {device_id!r} not recognized, broadcasting to all devices")
    return ALL_CALL


def resolve_command_format(name: str | None) -> int:
    """Map a command format name (e.g. 'lighting.general') to its byte."""
    key = (name or "").strip().lower()
    if key in COMMAND_FORMATS:
        return COMMAND_FORMATS[key]
    logger.warning(f"MSC command format {name!r} not recognized, using all-types (0x7F)")
    return ALL_TYPES


def resolve_command(name: str | None) -> int:
    """Map a command name (e.g. 'go') to its byte, defaulting to go."""
    key = (name or "").strip().lower()
    if key in COMMANDS:
        return COMMANDS[key]
    logger.warning(f"MSC command {name!r} not recognized, sending 'go'")
    return DEFAULT_COMMAND


def _text_bytes(value: str | int | float) -> list[int]:
    return [ord(char) for char in str(value)]


def build_msc(
    device_id: int | str | None,
    command_format: str | None,
    command: str | None,
    cue: str | int | float | None = None,
    cue_list: str | int | float | None = None,
    cue_path: str | int | float | None = None,
) -> list[int]:
    """
    Build a complete MSC sysex message.

    Args:
        device_id: Device number, "gN" group or "all"
        command_format: Format name such as "lighting.general"
        command: Command name such as "go" or "fire"
        cue: Cue number
        cue_list: Cue list, preceded by a 0x00 delimiter
        cue_path: Cue path, preceded by a 0x00 delimiter

    Returns:
        Message bytes from F0 to F7
    """
    message = [
        SYSEX_START,
        UNIVERSAL_REAL_TIME,
        resolve_device_id(device_id),
        MSC_SUB_ID,
        resolve_command_format(command_format),
        resolve_command(command),
    ]

    if cue not in (None, ""):
        message.extend(_text_bytes(cue))
    if cue_list not in (None, ""):
        message.append(0x00)
        message.extend(_text_bytes(cue_list))
    if cue_path not in (None, ""):
        message.append(0x00)
        message.extend(_text_bytes(cue_path))

    message.append(SYSEX_END)
    return message


def is_msc(data: list[int] | tuple[int, ...]) -> bool:
    """Whether a sysex message is an MSC message."""
    return (
        len(data) >= 5
        and data[0] == SYSEX_START
        and data[1] == UNIVERSAL_REAL_TIME
        and data[3] == MSC_SUB_ID
    )


def parse_msc(data: list[int] | tuple[int, ...]) -> tuple[int, int, int | None]:
    """
    Extract the raw (device id, command format, command) bytes.

    Names are not reverse-mapped; triggers match MSC on the raw bytes.
    """
    command = data[5] if len(data) > 5 else None
    return data[2], data[4], command
