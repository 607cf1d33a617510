import re

from gameblocker.blocker.batch_script import (
    ProgramEntry,
    WebsiteEntry,
    generate_block_script,
    generate_scripts,
    generate_unblock_script,
    resolve_process_name,
    script_filenames,
    split_wildcard,
    unique_process_names,
)
from gameblocker.blocker.hosts_blocker import unblock_lines

ROBLOX = ProgramEntry(name="Roblox", path=r"C:\Games\Roblox\RobloxPlayer.exe", process_name="RobloxPlayer.exe")
ROBLOX_VERSIONS = ProgramEntry(
    name="Roblox Beta", path="C:\\Games\\Roblox\\Versions\\*", process_name="RobloxPlayerBeta.exe"
)
STEAM = ProgramEntry(name="Steam", path=r"C:\Program Files\Steam\steam.exe", process_name="steam.exe")

DOMAIN_FILTER_RE = re.compile(r'findstr /v /i /r /c:"\[ \t\.\](.+?)\$"')
FINDSTR_PATTERN_RE = re.compile(r'/c:"([^"]*)"')


def lines_of(text):
    return text.split("\r\n")


def between_markers(text, version):
    lines = lines_of(text)
    start = lines.index(f'echo # ====== GAME BLOCKER {version} - START ====== >> "%HOSTS%"')
    end = lines.index(f'echo # ====== GAME BLOCKER {version} - END ====== >> "%HOSTS%"')
    return lines[start + 1 : end]


def domain_filters(unblock_text):
    return [m.replace("\\.", ".") for m in DOMAIN_FILTER_RE.findall(unblock_text)]


# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------
def test_script_filenames():
    assert script_filenames("v1.0.1") == ("block_games_v1.0.1.bat", "unblock_games_v1.0.1.bat")


def test_process_name_falls_back_to_path_basename():
    program = ProgramEntry(name="Epic", path=r"C:\Program Files\Epic Games\Launcher\EpicGamesLauncher.exe")
    assert resolve_process_name(program) == "EpicGamesLauncher.exe"


def test_split_wildcard_uses_first_star_only():
    assert split_wildcard(r"C:\Program Files\Steam\steam.exe") is None
    assert split_wildcard("C:\\Games\\Roblox\\Versions\\*") == "C:\\Games\\Roblox\\Versions\\"
    assert split_wildcard(r"C:\Games\v*\bin\*") == r"C:\Games\v"


def test_unique_process_names_collapse_duplicates_in_order():
    programs = [
        ROBLOX,
        STEAM,
        ProgramEntry(name="Roblox Studio", path=r"D:\Roblox\RobloxPlayer.exe", process_name="RobloxPlayer.exe"),
    ]
    assert unique_process_names(programs) == ["RobloxPlayer.exe", "steam.exe"]


# -------------------------------------------------------------------
# Block script
# -------------------------------------------------------------------
def test_round_trip_example():
    pair = generate_scripts([WebsiteEntry("roblox.com")], [ROBLOX], "v1.0.1")
    block = lines_of(pair.block_text)

    assert 'echo 127.0.0.1 roblox.com >> "%HOSTS%"' in block
    assert "taskkill /F /IM RobloxPlayer.exe >nul 2>&1" in block
    guard = block.index(r'if exist "C:\Games\Roblox\RobloxPlayer.exe" (')
    assert block[guard + 1] == (
        '    netsh advfirewall firewall add rule name="Block Roblox" dir=out action=block '
        r'program="C:\Games\Roblox\RobloxPlayer.exe" >nul 2>&1'
    )
    assert block[guard + 2] == ")"
    assert domain_filters(pair.unblock_text) == ["roblox.com"]
    assert pair.block_name == "block_games_v1.0.1.bat"
    assert pair.unblock_name == "unblock_games_v1.0.1.bat"


def test_every_url_once_in_marker_block_in_input_order():
    urls = ["roblox.com", "fortnite.com", "play.epicgames.com", "minecraft.net"]
    text = generate_block_script([WebsiteEntry(u) for u in urls], [], "v1.0.7")
    assert between_markers(text, "v1.0.7") == [f'echo 127.0.0.1 {u} >> "%HOSTS%"' for u in urls]
    for u in urls:
        assert text.count(f"127.0.0.1 {u} ") == 1


def test_hosts_backup_precedes_marker_block():
    text = generate_block_script([WebsiteEntry("roblox.com")], [], "v1.0.0")
    assert text.index('copy "%HOSTS%" "%HOSTS%.backup"') < text.index("GAME BLOCKER v1.0.0 - START")


def test_taskkill_lines_match_distinct_process_names():
    programs = [
        ROBLOX,
        ProgramEntry(name="Roblox (D drive)", path=r"D:\Roblox\RobloxPlayer.exe", process_name="RobloxPlayer.exe"),
        STEAM,
    ]
    text = generate_block_script([], programs, "v1.0.0")
    taskkills = [l for l in lines_of(text) if l.startswith("taskkill")]
    assert taskkills == [
        "taskkill /F /IM RobloxPlayer.exe >nul 2>&1",
        "taskkill /F /IM steam.exe >nul 2>&1",
    ]


def test_taskkill_quotes_process_names_with_spaces():
    program = ProgramEntry(name="LoL", path=r"C:\Riot Games\League of Legends\League of Legends.exe")
    text = generate_block_script([], [program], "v1.0.0")
    assert 'taskkill /F /IM "League of Legends.exe" >nul 2>&1' in lines_of(text)


def test_taskkill_quotes_shell_metacharacters_only_when_present():
    programs = [
        ROBLOX,
        ProgramEntry(name="Tom & Jerry", path=r"C:\Games\tom&jerry.exe", process_name="tom&jerry.exe"),
    ]
    taskkills = [l for l in lines_of(generate_block_script([], programs, "v1.0.0")) if l.startswith("taskkill")]
    assert taskkills == [
        "taskkill /F /IM RobloxPlayer.exe >nul 2>&1",
        'taskkill /F /IM "tom&jerry.exe" >nul 2>&1',
    ]


def test_each_program_gets_one_delete_rule_in_both_scripts():
    programs = [ROBLOX, ROBLOX_VERSIONS, STEAM]
    pair = generate_scripts([], programs, "v1.0.0")
    for p in programs:
        line = f'netsh advfirewall firewall delete rule name="Block {p.name}" >nul 2>&1'
        assert lines_of(pair.block_text).count(line) == 1
        assert lines_of(pair.unblock_text).count(line) == 1


def test_delete_rules_come_before_add_rules():
    text = generate_block_script([], [STEAM], "v1.0.0")
    assert text.index('delete rule name="Block Steam"') < text.index('add rule name="Block Steam"')


def test_wildcard_path_emits_enumeration_loop():
    text = generate_block_script([], [ROBLOX_VERSIONS], "v1.0.0")
    lines = lines_of(text)
    start = lines.index('if exist "C:\\Games\\Roblox\\Versions\\" (')
    assert lines[start : start + 7] == [
        'if exist "C:\\Games\\Roblox\\Versions\\" (',
        '    for /d %%i in ("C:\\Games\\Roblox\\Versions\\*") do (',
        '        if exist "%%i\\RobloxPlayerBeta.exe" (',
        '            netsh advfirewall firewall add rule name="Block Roblox Beta" dir=out action=block '
        'program="%%i\\RobloxPlayerBeta.exe" >nul 2>&1',
        "        )",
        "    )",
        ")",
    ]
    assert 'if exist "C:\\Games\\Roblox\\Versions\\*" (' not in text
    assert 'program="C:\\Games\\Roblox\\Versions\\*"' not in text


def test_literal_path_emits_single_guarded_rule():
    text = generate_block_script([], [STEAM], "v1.0.0")
    assert text.count(r'if exist "C:\Program Files\Steam\steam.exe" (') == 1
    assert text.count("add rule") == 1
    assert "for /d" not in text


def test_wildcard_without_usable_process_name_is_skipped():
    program = ProgramEntry(name="Mystery", path="C:\\Games\\Mystery\\*")
    text = generate_block_script([], [program], "v1.0.0")
    assert "taskkill" not in text
    assert "add rule" not in text
    assert 'delete rule name="Block Mystery"' in text


def test_percent_signs_are_doubled():
    program = ProgramEntry(name="100% Orange Juice", path=r"C:\Games\100%OJ\game.exe", process_name="game.exe")
    text = generate_block_script([], [program], "v1.0.0")
    assert 'name="Block 100%% Orange Juice"' in text
    assert r'if exist "C:\Games\100%%OJ\game.exe" (' in text


def test_block_flushes_dns_and_names_unblock_script():
    text = generate_block_script([], [], "v2.1.0")
    assert "ipconfig /flushdns >nul 2>&1" in text
    assert 'echo To unblock, run "unblock_games_v2.1.0.bat"' in text
    assert text.rstrip("\r\n").endswith("exit")


# -------------------------------------------------------------------
# Unblock script
# -------------------------------------------------------------------
def test_unblock_filters_tag_then_unique_registered_domains():
    websites = [WebsiteEntry(u) for u in ["roblox.com", "www.roblox.com", "sub.games.com", "games.com", "steam.com"]]
    text = generate_unblock_script(websites, [], "v1.0.0")
    assert domain_filters(text) == ["roblox.com", "games.com", "steam.com"]
    assert text.index('findstr /v /c:"GAME BLOCKER"') < text.index("roblox\\.com")
    assert text.count('copy "%HOSTS%" "%TEMP_HOSTS%"') == 3


def test_unblock_domain_filter_matches_whole_hostnames():
    text = generate_unblock_script([WebsiteEntry("roblox.com")], [], "v1.0.0")
    assert (
        'findstr /v /i /r /c:"[ \t.]roblox\\.com$" /c:"[ \t.]roblox\\.com[ \t#]" "%TEMP_HOSTS%" > "%HOSTS%" 2>nul'
        in lines_of(text)
    )


def test_unblock_findstr_patterns_agree_with_hosts_model():
    domains = ["roblox.com", "games.com"]
    text = generate_unblock_script([WebsiteEntry(d) for d in domains], [], "v1.0.0")
    patterns = [
        p
        for line in lines_of(text)
        if line.startswith("findstr /v /i /r")
        for p in FINDSTR_PATTERN_RE.findall(line)
    ]
    assert len(patterns) == 4

    samples = [
        "127.0.0.1 roblox.com",
        "127.0.0.1\troblox.com",
        "127.0.0.1\tcdn.roblox.com\t# tabbed",
        "127.0.0.1 roblox.com ",
        "127.0.0.1 WWW.GAMES.COM",
        "127.0.0.1 notroblox.com",
        "127.0.0.1 roblox.com.evil.net",
        "127.0.0.1\tcrabgames.com",
        "# see roblox.com/help",
        "127.0.0.1 localhost",
    ]
    script_kept = [s for s in samples if not any(re.search(p, s, re.IGNORECASE) for p in patterns)]
    assert script_kept == unblock_lines(samples, domains)
    assert script_kept == [
        "127.0.0.1 notroblox.com",
        "127.0.0.1 roblox.com.evil.net",
        "127.0.0.1\tcrabgames.com",
        "# see roblox.com/help",
        "127.0.0.1 localhost",
    ]


def test_unblock_has_its_own_banner():
    text = generate_unblock_script([], [], "v1.0.0")
    assert "color 0A" in text
    assert "echo        GAME BLOCKER - UNBLOCK MODE" in text
    assert "title Game Blocker - Unblock Mode v1.0.0" in text


# -------------------------------------------------------------------
# Whole-output properties
# -------------------------------------------------------------------
def test_empty_blocklist_still_yields_complete_scripts():
    pair = generate_scripts([], [], "v1.0.0")
    for text in (pair.block_text, pair.unblock_text):
        assert text.startswith("@echo off\r\n")
        assert "net session >nul 2>&1" in text
        assert "Version: v1.0.0" in text
        assert "ipconfig /flushdns" in text
    assert between_markers(pair.block_text, "v1.0.0") == []
    assert domain_filters(pair.unblock_text) == []
    # tag-stripped copy is still written back when no domains are registered
    assert 'copy "%TEMP_HOSTS%" "%HOSTS%" >nul 2>&1' in lines_of(pair.unblock_text)


def test_output_is_deterministic_and_crlf_only():
    websites = [WebsiteEntry("roblox.com"), WebsiteEntry("fortnite.com")]
    programs = [ROBLOX, ROBLOX_VERSIONS, STEAM]
    first = generate_scripts(websites, programs, "v1.0.4")
    second = generate_scripts(list(websites), list(programs), "v1.0.4")
    assert first == second
    for text in (first.block_text, first.unblock_text):
        assert text.endswith("\r\n")
        assert "\n" not in text.replace("\r\n", "")
