# src/gameblocker/blocker/batch_script.py
"""Block/unblock batch script generation.

Turns the blocklist (websites and programs) into a pair of Windows batch
scripts. Generation is a pure text transform: nothing here touches the
local hosts file or firewall, and the output depends only on the inputs.

Checks that can only be answered on the target machine (does the program
path exist, which versioned folder holds the executable) are emitted as
``if exist`` / ``for /d`` constructs and resolved when the script runs.
"""
from __future__ import annotations

import ntpath
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .config import (
    BLOCK_FILE_PATTERN,
    BLOCK_MARK,
    EXIT_DELAY_SECONDS,
    HOSTS_PATH,
    REDIRECT_IP,
    RULE_PREFIX,
    TEMP_HOSTS_PATH,
    UNBLOCK_FILE_PATTERN,
)
from .hosts_blocker import domain_patterns, end_marker, start_marker, unique_domains

CRLF = "\r\n"
WILDCARD = "*"
_NEEDS_QUOTES = " \t&|<>^(),;="


@dataclass(frozen=True)
class WebsiteEntry:
    url: str


@dataclass(frozen=True)
class ProgramEntry:
    name: str
    path: str
    process_name: str = ""


@dataclass(frozen=True)
class ScriptPair:
    version: str
    block_name: str
    block_text: str
    unblock_name: str
    unblock_text: str


# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------
def script_filenames(version: str) -> tuple:
    return BLOCK_FILE_PATTERN.format(version=version), UNBLOCK_FILE_PATTERN.format(version=version)


def escape_batch(text: str) -> str:
    """Double ``%`` so cmd.exe does not expand it as a variable reference."""
    return text.replace("%", "%%")


def resolve_process_name(program: ProgramEntry) -> str:
    if program.process_name:
        return program.process_name
    return ntpath.basename(program.path.rstrip("\\/"))


def split_wildcard(path: str) -> Optional[str]:
    """Enumeration base of a wildcard path, or None for a literal path.

    Only the first ``*`` counts; anything after it is ignored.
    """
    if WILDCARD not in path:
        return None
    return path.split(WILDCARD, 1)[0]


def unique_process_names(programs: Iterable[ProgramEntry]) -> List[str]:
    names: List[str] = []
    for program in programs:
        name = resolve_process_name(program)
        if not name or WILDCARD in name or name in names:
            continue
        names.append(name)
    return names


def rule_name(program: ProgramEntry) -> str:
    return f"{RULE_PREFIX} {escape_batch(program.name)}"


def quote_arg(text: str) -> str:
    """Quote a command argument that holds a space or a cmd.exe metacharacter."""
    if any(ch in text for ch in _NEEDS_QUOTES):
        return f'"{text}"'
    return text


# -------------------------------------------------------------------
# Shared sections
# -------------------------------------------------------------------
def _header(title: str, purpose: str, version: str) -> List[str]:
    return [
        "@echo off",
        ":: ===================================",
        f":: {title} {version}",
        f":: {purpose}",
        ":: Auto-elevates to Administrator!",
        ":: ===================================",
        "",
        ":: ===================================",
        ":: AUTO-ELEVATE TO ADMINISTRATOR",
        ":: ===================================",
        "net session >nul 2>&1",
        "if %errorLevel% neq 0 (",
        "    echo Requesting Administrator privileges...",
        "    powershell -Command \"Start-Process -Verb RunAs -FilePath '%~f0'\"",
        "    exit /b",
        ")",
        "",
    ]


def _banner(mode: str, color: str, version: str) -> List[str]:
    return [
        f"title Game Blocker - {mode.title()} Mode {version}",
        f"color {color}",
        "echo.",
        "echo ========================================",
        f"echo        GAME BLOCKER - {mode.upper()} MODE",
        f"echo             Version: {version}",
        "echo ========================================",
        "echo.",
        "",
        "echo [INFO] Running with Administrator privileges...",
        "echo.",
        "",
    ]


def _section(title: str) -> List[str]:
    return [
        ":: ===================================",
        f":: {title}",
        ":: ===================================",
    ]


def _flush_dns(step: int) -> List[str]:
    return [
        ":: Flush DNS cache",
        f"echo [STEP {step}] Flushing DNS cache...",
        "ipconfig /flushdns >nul 2>&1",
        "echo [OK] DNS cache flushed!",
        "echo.",
        "",
    ]


def _footer(headline: str, version: str, notes: Sequence[str]) -> List[str]:
    lines = [
        "echo ========================================",
        f"echo      {headline}",
        f"echo             Version: {version}",
        "echo ========================================",
        "echo.",
    ]
    lines += [f"echo {note}" for note in notes]
    lines += [
        "echo.",
        f"timeout /t {EXIT_DELAY_SECONDS} /nobreak >nul",
        "exit",
    ]
    return lines


def _delete_rules(programs: Sequence[ProgramEntry]) -> List[str]:
    return [f'netsh advfirewall firewall delete rule name="{rule_name(p)}" >nul 2>&1' for p in programs]


def _add_rule(program: ProgramEntry) -> List[str]:
    name = rule_name(program)
    process_name = resolve_process_name(program)
    base = split_wildcard(program.path)

    if base is None:
        path = escape_batch(program.path)
        return [
            f'if exist "{path}" (',
            f'    netsh advfirewall firewall add rule name="{name}" dir=out action=block program="{path}" >nul 2>&1',
            ")",
        ]

    if not process_name or WILDCARD in process_name:
        return []

    base = escape_batch(base)
    target = "%%i\\" + escape_batch(process_name)
    return [
        f'if exist "{base}" (',
        f'    for /d %%i in ("{base}{WILDCARD}") do (',
        f'        if exist "{target}" (',
        f'            netsh advfirewall firewall add rule name="{name}" dir=out action=block program="{target}" >nul 2>&1',
        "        )",
        "    )",
        ")",
    ]


def _join(lines: Sequence[str]) -> str:
    return CRLF.join(lines) + CRLF


# -------------------------------------------------------------------
# Generators
# -------------------------------------------------------------------
def generate_block_script(
    websites: Sequence[WebsiteEntry],
    programs: Sequence[ProgramEntry],
    version: str,
) -> str:
    _, unblock_name = script_filenames(version)

    lines = _header("Game Blocker Script", "Block gaming websites and programs", version)
    lines += _banner("block", "0C", version)

    lines += _section("BLOCK GAMING WEBSITES")
    lines += [
        "echo [STEP 1] Blocking gaming websites...",
        "",
        f"set HOSTS={HOSTS_PATH}",
        "",
        ":: Backup hosts file",
        'copy "%HOSTS%" "%HOSTS%.backup" >nul 2>&1',
        "",
        ":: Add gaming websites to hosts file (redirect to localhost)",
        'echo. >> "%HOSTS%"',
        f'echo {start_marker(version)} >> "%HOSTS%"',
    ]
    lines += [f'echo {REDIRECT_IP} {escape_batch(w.url)} >> "%HOSTS%"' for w in websites]
    lines += [
        f'echo {end_marker(version)} >> "%HOSTS%"',
        "",
        "echo [OK] Gaming websites blocked!",
        "echo.",
        "",
    ]

    lines += _section("BLOCK GAMING PROGRAMS")
    lines += [
        "echo [STEP 2] Blocking gaming programs...",
        "",
        ":: Kill running game processes",
    ]
    lines += [f"taskkill /F /IM {quote_arg(escape_batch(name))} >nul 2>&1" for name in unique_process_names(programs)]
    lines += [
        "",
        "echo [OK] Gaming processes terminated!",
        "echo.",
        "",
        ":: Block gaming programs using Windows Firewall",
        "echo [STEP 3] Creating firewall rules...",
        "",
        ":: Remove old rules first (if exist)",
    ]
    lines += _delete_rules(programs)
    lines += ["", ":: Add firewall rules to block gaming programs"]
    for program in programs:
        lines += _add_rule(program)
    lines += [
        "",
        "echo [OK] Firewall rules created!",
        "echo.",
        "",
    ]

    lines += _flush_dns(4)
    lines += _footer(
        "GAME BLOCKING COMPLETED!",
        version,
        ["Gaming websites and programs are now blocked.", f'To unblock, run "{unblock_name}"'],
    )
    return _join(lines)


def generate_unblock_script(
    websites: Sequence[WebsiteEntry],
    programs: Sequence[ProgramEntry],
    version: str,
) -> str:
    lines = _header("Game Unblocker Script", "Remove blocks on gaming websites and programs", version)
    lines += _banner("unblock", "0A", version)

    lines += _section("UNBLOCK GAMING WEBSITES")
    lines += [
        "echo [STEP 1] Unblocking gaming websites...",
        "",
        f"set HOSTS={HOSTS_PATH}",
        f"set TEMP_HOSTS={TEMP_HOSTS_PATH}",
        "",
        ":: Remove game blocker entries from hosts file",
        f'findstr /v /c:"{BLOCK_MARK}" "%HOSTS%" > "%TEMP_HOSTS%" 2>nul',
    ]
    for domain in unique_domains(w.url for w in websites):
        patterns = " ".join(f'/c:"{escape_batch(p)}"' for p in domain_patterns(domain))
        lines += [
            f'findstr /v /i /r {patterns} "%TEMP_HOSTS%" > "%HOSTS%" 2>nul',
            'copy "%HOSTS%" "%TEMP_HOSTS%" >nul 2>&1',
        ]
    lines += [
        'copy "%TEMP_HOSTS%" "%HOSTS%" >nul 2>&1',
        'del "%TEMP_HOSTS%" >nul 2>&1',
        "",
        "echo [OK] Gaming websites unblocked!",
        "echo.",
        "",
    ]

    lines += _section("UNBLOCK GAMING PROGRAMS (Remove Firewall Rules)")
    lines += ["echo [STEP 2] Removing firewall rules...", ""]
    lines += _delete_rules(programs)
    lines += [
        "",
        "echo [OK] Firewall rules removed!",
        "echo.",
        "",
    ]

    lines += _flush_dns(3)
    lines += _footer(
        "GAME UNBLOCKING COMPLETED!",
        version,
        ["All gaming websites and programs are now unblocked."],
    )
    return _join(lines)


def generate_scripts(
    websites: Sequence[WebsiteEntry],
    programs: Sequence[ProgramEntry],
    version: str,
) -> ScriptPair:
    block_name, unblock_name = script_filenames(version)
    return ScriptPair(
        version=version,
        block_name=block_name,
        block_text=generate_block_script(websites, programs, version),
        unblock_name=unblock_name,
        unblock_text=generate_unblock_script(websites, programs, version),
    )
