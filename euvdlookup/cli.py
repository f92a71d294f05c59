"""Interactive menu for looking up EUVD records."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Callable, Mapping
from functools import partial
from typing import Any, TextIO

from .client import EuvdClient, EuvdError
from .models import JsonModel

__all__ = ["banner", "format_json", "self_test", "main_menu", "main"]

logger = logging.getLogger(__name__)

_BANNER = r"""
 _____ _     _     ____ 
/  __// \ /\/ \ |\/  _ \
|  \  | | ||| | //| | \|
|  /_ | \_/|| \// | |_/|
\____\\____/\__/  \____/
                        
EUVD Lookup CLI
Based on the EUVD API
"""

_MENU = """
=== EUVD Tool Menu ===
1. Show Latest Vulnerabilities
2. Show Exploited Vulnerabilities
3. Show Critical Vulnerabilities
4. Search by CVE ID
5. Search by ENISA ID
6. Search by Advisory ID
7. Search vulnerabilities by text
8. Run full self-test
9. Exit
"""

_HTML_ESCAPES = {
    ord("<"): "\\u003c",
    ord(">"): "\\u003e",
    ord("&"): "\\u0026",
    0x2028: "\\u2028",
    0x2029: "\\u2029",
}


def banner() -> str:
    """Return the start-up banner."""
    return _BANNER


def _plain(value: Any) -> Any:
    if isinstance(value, JsonModel):
        return _plain(value.to_dict())
    if isinstance(value, Mapping):
        return {str(key): _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return int(value)
    return value


def format_json(data: Any) -> str:
    """Render records as two-space indented JSON ending in a newline."""
    text = json.dumps(_plain(data), indent=2, ensure_ascii=False)
    return text.translate(_HTML_ESCAPES) + "\n"


def self_test(client: EuvdClient | None = None, path: str = "test.txt") -> bool:
    """Query every endpoint, save the answers to ``path``; True if all succeeded."""
    client = client if client is not None else EuvdClient()
    logger.info("Running self-test against all EUVD API endpoints...")
    checks: list[tuple[str, Callable[[], Any]]] = [
        ("Latest Vulnerabilities", client.latest_vulnerabilities),
        ("Critical Vulnerabilities", client.critical_vulnerabilities),
        ("Sample Query With Filters", partial(client.search, "vulnerability")),
        ("Vulnerability By ID", partial(client.vulnerability, "CVE-2024-0864")),
        ("ENISA Vulnerability By ID", partial(client.enisa_vulnerability, "EUVD-2024-45012")),
        ("Advisory By ID", partial(client.advisory, "cisco-sa-ata19x-multi-RDTEqRsy")),
        ("Exploited Vulnerabilities", client.exploited_vulnerabilities),
    ]
    try:
        output = open(path, "w", encoding="utf-8")
    except OSError as exc:
        logger.error("Failed to create %s: %s", path, exc)
        return False
    success = True
    with output:
        for position, (title, fetch) in enumerate(checks):
            logger.info("Self-test fetching: %s", title)
            try:
                data = fetch()
            except EuvdError as exc:
                logger.error("Self-test FAILED for %s: %s", title, exc)
                success = False
                continue
            prefix = "\n" if position else ""
            output.write(f"{prefix}===== {title} =====\n")
            output.write(format_json(data))
    if success:
        logger.info("Self-test PASSED: All responses saved to %s.", path)
    else:
        logger.info("Self-test completed with some FAILED requests. See log for details.")
    return success


def _prompt(stdin: TextIO, stdout: TextIO, text: str) -> str | None:
    stdout.write(text)
    stdout.flush()
    line = stdin.readline()
    return line.strip() if line else None


def main_menu(
    client: EuvdClient | None = None,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> None:
    """Run the interactive menu until the user exits or input ends."""
    client = client if client is not None else EuvdClient()
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    def show(fetch: Callable[[], Any]) -> None:
        try:
            data = fetch()
        except EuvdError as exc:
            logger.error("Error: %s", exc)
            return
        stdout.write(format_json(data))

    def ask_and_show(question: str, fetch: Callable[[str], Any]) -> bool:
        answer = _prompt(stdin, stdout, question)
        if answer is None:
            return False
        show(partial(fetch, answer))
        return True

    lookups: dict[str, tuple[str, Callable[[str], Any]]] = {
        "4": ("Enter CVE ID (e.g., CVE-2024-0864): ", client.vulnerability),
        "5": ("Enter ENISA ID (e.g., EUVD-2024-45012): ", client.enisa_vulnerability),
        "6": (
            "Enter Advisory ID (e.g., cisco-sa-ata19x-multi-RDTEqRsy): ",
            client.advisory,
        ),
        "7": ("Enter text to search: ", client.search),
    }
    listings: dict[str, Callable[[], Any]] = {
        "1": client.latest_vulnerabilities,
        "2": client.exploited_vulnerabilities,
        "3": client.critical_vulnerabilities,
    }

    while True:
        stdout.write(_MENU)
        option = _prompt(stdin, stdout, "Select an option: ")
        if option is None:
            return
        if option in listings:
            show(listings[option])
        elif option in lookups:
            if not ask_and_show(*lookups[option]):
                return
        elif option == "8":
            self_test(client)
        elif option == "9":
            stdout.write("Exiting...\n")
            return
        else:
            stdout.write("Invalid option.\n")


def main(argv: list[str] | None = None) -> int:
    """Show the banner and run the interactive menu."""
    parser = argparse.ArgumentParser(
        prog="euvdlookup", description="Look up vulnerabilities in the EUVD."
    )
    parser.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(message)s", datefmt="%Y/%m/%d %H:%M:%S"
    )
    sys.stdout.write(banner() + "\n")
    main_menu()
    return 0