#!/usr/bin/env python3
"""
AlloCAT Resource Allocation Tool - Specification Collection Script
Version: 1.0

Interactive wizard that asks for the application specification used by the
resource decisions: four text fields followed by an importance level choice.
Also provides the busy spinner shown while the decisions are running.

Enter "<" at any prompt to go back to the previous one. Ctrl+C aborts.
"""

import asyncio
import os
import sys
from typing import Callable, Dict, List, Optional, TextIO, Tuple

from decide_resources import IMPORTANCE_LEVELS, InputSpec

# ANSI colours
BOLD = "\033[1m"
DIM = "\033[2m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
RED = "\033[31m"
RESET = "\033[0m"

LABEL_WIDTH: int = 24
APP_NAME_MAX_LENGTH: int = 30
COUNT_MAX_DIGITS: int = 6
BACK: str = "<"

SPINNER_FRAMES: List[str] = ["⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏"]
SPINNER_INTERVAL: float = 0.1  # seconds


def bold(s): return f"{BOLD}{s}{RESET}"
def dim(s): return f"{DIM}{s}{RESET}"
def green(s): return f"{GREEN}{s}{RESET}"
def yellow(s): return f"{YELLOW}{s}{RESET}"
def red(s): return f"{RED}{s}{RESET}"


def parse_app_name(value: str) -> str:
    name = value.strip()
    if not name:
        raise ValueError("required")
    if len(name) > APP_NAME_MAX_LENGTH:
        raise ValueError(f"must be at most {APP_NAME_MAX_LENGTH} characters")
    # The name becomes a file name under the output directory
    if any(ch in name for ch in (os.sep, "/", "\0")):
        raise ValueError("must not contain '/' or NUL characters")
    return name


def parse_count(value: str) -> int:
    """
    Parse a non-negative whole number typed into a numeric field.

    Args:
        value (str): Raw text entered by the user

    Returns:
        int: Parsed value

    Raises:
        ValueError: If the text is not a non-negative integer of at most
                    COUNT_MAX_DIGITS digits
    """
    raw = value.strip()
    if raw.startswith("-") and raw[1:].isascii() and raw[1:].isdigit():
        raise ValueError("must not be negative")
    # int() alone would also take "+5", "1_000" and non-ASCII digits
    if not (raw.isascii() and raw.isdigit()):
        raise ValueError("must be a number")
    if len(raw) > COUNT_MAX_DIGITS:
        raise ValueError(f"must be at most {COUNT_MAX_DIGITS} digits")
    return int(raw)


# (field, label, placeholder, parser)
TEXT_FIELDS: List[Tuple[str, str, str, Callable[[str], object]]] = [
    ("app_name", "App Name:", "e.g. my-web-app", parse_app_name),
    ("expected_load", "Expected Load (RPS):", "e.g. 500", parse_count),
    ("data_size", "Data Size (MB):", "e.g. 100", parse_count),
    ("network_traffic", "Network Traffic (Mbps):", "e.g. 75", parse_count),
]


def ask(label: str, placeholder: str = "") -> str:
    hint = f" {dim(placeholder)}" if placeholder else ""
    return input(f"{label:>{LABEL_WIDTH}} > {hint} ").strip()


def choose_importance(default_idx: int = 0) -> str:
    """
    Show the importance level list and return the chosen level, or BACK.

    Accepts the option number or the level name. An empty answer selects
    the highlighted (default) option.
    """
    print(f"\n{YELLOW}{BOLD}Select Importance Level{RESET}")
    for i, level in enumerate(IMPORTANCE_LEVELS):
        if i == default_idx:
            print(green(f"  > {i + 1}. {level}"))
        else:
            print(f"    {i + 1}. {level}")
    while True:
        raw = input(f"  Choice [{dim(str(default_idx + 1))}]: ").strip().lower()
        if raw == BACK:
            return BACK
        if not raw:
            return IMPORTANCE_LEVELS[default_idx]
        if raw in IMPORTANCE_LEVELS:
            return raw
        try:
            idx = int(raw) - 1
            if 0 <= idx < len(IMPORTANCE_LEVELS):
                return IMPORTANCE_LEVELS[idx]
        except ValueError:
            pass
        print(f"  {red(f'Enter 1-{len(IMPORTANCE_LEVELS)}.')}")


def run_wizard() -> InputSpec:
    """
    Collect the application specification interactively.

    Steps 0-3 are the text fields, step 4 is the importance choice. An
    invalid value keeps the wizard on the same step.

    Returns:
        InputSpec: The fully populated specification
    """
    print(bold("Enter application specifications:"))
    print(dim(f"Press Enter to continue, '{BACK}' to go back, Ctrl+C to quit.\n"))

    values: Dict[str, object] = {}
    step = 0
    while True:
        if step < len(TEXT_FIELDS):
            field, label, placeholder, parser = TEXT_FIELDS[step]
            raw = ask(label, placeholder)
            if raw == BACK:
                step = max(0, step - 1)
                continue
            try:
                values[field] = parser(raw)
            except ValueError as e:
                print(f"{'':>{LABEL_WIDTH}}   {red(str(e))}")
                continue
            step += 1
        else:
            importance = choose_importance()
            if importance == BACK:
                step = len(TEXT_FIELDS) - 1
                continue
            return InputSpec(
                app_name=values["app_name"],
                expected_load=values["expected_load"],
                data_size=values["data_size"],
                network_traffic=values["network_traffic"],
                importance=importance,
            )


async def spin(message: str, interval: float = SPINNER_INTERVAL, stream: Optional[TextIO] = None) -> None:
    """Animate a spinner in front of message until cancelled."""
    if stream is None:
        stream = sys.stdout
    frame = 0
    try:
        while True:
            stream.write(f"\r{SPINNER_FRAMES[frame]} {message}")
            stream.flush()
            frame = (frame + 1) % len(SPINNER_FRAMES)
            await asyncio.sleep(interval)
    finally:
        stream.write("\r" + " " * (len(message) + 2) + "\r")
        stream.flush()
