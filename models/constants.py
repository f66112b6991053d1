# models/constants.py
"""Vocabularies shared by the extraction cascade and the block classifier.

All sets hold upper-case tokens; callers upper-case before membership checks.
"""

from __future__ import annotations

# Scene-direction terms and stop-words that are never registered as entities.
NOISE_WORDS: frozenset[str] = frozenset(
    {
        "PANEL",
        "PAGE",
        "SCENE",
        "INT",
        "EXT",
        "CUT",
        "FADE",
        "DISSOLVE",
        "SMASH",
        "MATCH",
        "CONTINUED",
        "CONT",
        "ANGLE",
        "CLOSE",
        "WIDE",
        "PAN",
        "ZOOM",
        "SFX",
        "VO",
        "OS",
        "OC",
        "POV",
        "INSERT",
        "SUPER",
        "TITLE",
        "THE",
        "AND",
        "BUT",
        "FOR",
        "NOT",
        "WITH",
        "FROM",
        "ACT",
        "END",
        "DAY",
        "NIGHT",
        "MORNING",
        "EVENING",
        "LATER",
        "CONTINUOUS",
        "INTERCUT",
        "FLASHBACK",
        "MONTAGE",
        "BEGIN",
        "RESUME",
        "BACK",
        "SAME",
        "TIME",
        "CAPTION",
        "SETTING",
        "SHOT",
        "ESTABLISHING",
        "EXTERIOR",
        "INTERIOR",
        "TO",
        "IN",
        "ON",
        "AT",
        "OF",
        "A",
        "AN",
        "IS",
        "ARE",
        "WAS",
        "WERE",
        "BE",
        "BEEN",
        "NARRATION",
        "NARRATOR",
        "DESCRIPTION",
        "NOTE",
        "ACTION",
    }
)

LOCATION_INDICATORS: frozenset[str] = frozenset(
    {
        "WAREHOUSE",
        "ROOM",
        "BUILDING",
        "STREET",
        "LAB",
        "LABORATORY",
        "HOSPITAL",
        "GARAGE",
        "OFFICE",
        "BUREAU",
        "HEADQUARTERS",
        "HQ",
        "APARTMENT",
        "HOUSE",
        "MANSION",
        "CHURCH",
        "TEMPLE",
        "SCHOOL",
        "STATION",
        "PARK",
        "ALLEY",
        "BRIDGE",
        "TOWER",
        "PRISON",
        "JAIL",
        "COURT",
        "COURTROOM",
        "DINER",
        "BAR",
        "RESTAURANT",
        "CAFÉ",
        "CAFE",
        "MALL",
        "SHOP",
        "STORE",
        "MARKET",
        "ARENA",
        "STADIUM",
        "LIBRARY",
        "MUSEUM",
        "HALL",
        "HALLWAY",
        "CORRIDOR",
        "BASEMENT",
        "ROOFTOP",
        "ROOF",
        "BUNKER",
        "CAVE",
        "FOREST",
        "DOCK",
        "PORT",
        "HARBOR",
        "HANGAR",
        "FACILITY",
        "CENTER",
        "CENTRE",
        "THEATRE",
        "THEATER",
        "BASE",
        "COMMAND",
        "DIMENSION",
        "REALM",
        "VOID",
        "SITE",
        "INTERSECTION",
        "CROSSWALK",
        "SIDEWALK",
        "LOBBY",
        "ELEVATOR",
        "STUDIO",
        "CLINIC",
        "WARD",
    }
)

# Organisation keywords used to lift upper-case phrases into faction lore.
FACTION_KEYWORDS: frozenset[str] = frozenset(
    {
        "DEPARTMENT",
        "AGENCY",
        "INSTITUTE",
        "ORGANIZATION",
        "ORDER",
        "GUILD",
        "SQUAD",
        "DIVISION",
        "BUREAU",
        "TEAM",
        "FORCE",
        "CORPS",
        "GROUP",
        "UNION",
        "COUNCIL",
        "COMMITTEE",
        "ALLIANCE",
        "LEAGUE",
        "SYNDICATE",
        "COLLECTIVE",
        "SOCIETY",
        "BROTHERHOOD",
        "SISTERHOOD",
        "ASSOCIATION",
        "FOUNDATION",
        "MINISTRY",
        "COMMAND",
        "AUTHORITY",
    }
)

# Speakers that are devices, signage or groups rather than characters.
NON_CHARACTER_WORDS: frozenset[str] = frozenset(
    {
        "SIGN",
        "BANNER",
        "PLACARD",
        "GRAFFITI",
        "TEXT",
        "SCREEN",
        "DISPLAY",
        "RADIO",
        "TV",
        "TELEVISION",
        "NEWS",
        "BROADCAST",
        "INTERCOM",
        "PA",
        "SPEAKER",
        "PHONE",
        "RECORDING",
        "VOICEMAIL",
        "ANSWERING",
        "NEWSPAPER",
        "LETTER",
        "DOCUMENT",
        "NOTE",
        "POSTER",
        "BILLBOARD",
        "MARQUEE",
        "CROWD",
        "CHANT",
        "CHORUS",
        "ALL",
        "EVERYONE",
        "VOICE",
        "VOICES",
        "SFX",
        "SOUND",
        "MUSIC",
        "SONG",
        "NARRATOR",
        "CAPTION",
        "TITLE",
        "CRAWL",
        "CRAWLER",
        "CHYRON",
        "SUPER",
        "MONITOR",
        "COMPUTER",
        "DEVICE",
        "ALARM",
        "SIREN",
        "HORN",
        "ANNOUNCEMENT",
        "ANNOUNCER",
        "AUTOMATED",
        "SYSTEM",
        "GPS",
        "AI",
    }
)

# Order matters: the cascade scans verbs in this order.
ECHO_ACTION_VERBS: tuple[str, ...] = (
    "holds",
    "hold",
    "holding",
    "clutches",
    "clutch",
    "clutching",
    "wears",
    "wear",
    "wearing",
    "carries",
    "carry",
    "carrying",
    "grabs",
    "grab",
    "grabbing",
    "picks up",
    "pick up",
    "picking up",
    "draws",
    "draw",
    "drawing",
    "wields",
    "wield",
    "wielding",
    "takes",
    "take",
    "taking",
    "retrieves",
    "retrieve",
    "retrieving",
    "brandishes",
    "brandish",
    "brandishing",
    "raises",
    "raise",
    "raising",
    "drops",
    "drop",
    "dropping",
    "throws",
    "throw",
    "throwing",
    "catches",
    "catch",
    "catching",
)

# Panel visual markers recognised in block text, e.g. "[ECHO]".
VISUAL_MARKERS: frozenset[str] = frozenset({"echo", "hitch", "overflow", "shattered", "split"})

# Markers understood by consumers of the legacy parse shape.
LEGACY_VISUAL_MARKERS: frozenset[str] = frozenset(
    {
        "standard",
        "echo",
        "hitch",
        "overflow",
        "shattered",
        "split",
        "splash",
        "inset",
        "large",
        "full-width",
    }
)
