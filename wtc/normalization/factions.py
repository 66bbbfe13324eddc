# wtc/normalization/factions.py
from typing import Dict, Optional

from wtc.models.enums import Faction

_CASTERS_BY_FACTION: Dict[Faction, tuple] = {
    Faction.EVERBLIGHT: (
        "Absylonia 2", "Kallus 1", "Lylyth 1", "Lylyth 3", "Rhyas 1",
        "Saeryn 2 & Rhyas 2", "Thagrosh 1", "Thagrosh 2", "Vayl 1", "Vayl 2",
    ),
    Faction.CRYX: (
        "Agathia 1", "Asphyxious 3", "Deneghra 1", "Goreshade 1", "Goreshade 2",
        "Mortenebra 1", "Scaverous 1", "Skarre 1", "Skarre 2", "Terminus 1",
        "Venethrax 1", "Witch coven 1",
    ),
    Faction.MENOTH: (
        "Amon 1", "Durst 1", "Harbinger 1", "High Reclaimer 1", "High Reclaimer 2",
        "Kreoss 1", "Kreoss 3", "Malekus 1", "Reznik 1", "Reznik 2", "Severius 1",
        "Severius 2", "Thyra 1", "Vindictus 1",
    ),
    Faction.MINION: (
        "Arkadius 1", "Barnabas 1", "Carver 1", "Maelok 1", "Rask 1",
        "Sturm & Drang 1",
    ),
    Faction.CYRISS: (
        "Aurora 1", "Axis 1", "Directrix 1", "Iron Mother 1", "Lucant 1",
    ),
    Faction.ORBOROS: (
        "Baldur 1", "Baldur 2", "Grayle 1", "Kaya 2", "Kromac 1", "Kromac 2",
        "Krueger 1", "Tanith 1", "Wurmwood 1",
    ),
    Faction.TROLLBLOODS: (
        "Borka 1", "Borka 2", "Calandra 1", "Doomshaper 1", "Doomshaper 2",
        "Doomshaper 3", "Grim 2", "Grissel 2", "Gunnbjorn 1", "Madrak 2",
        "Ragnor 1", "Skuld 1",
    ),
    Faction.KHADOR: (
        "Butcher 1", "Butcher 3", "Vladimir 1", "Vladimir 2", "Vladimir 3",
        "Harkevich 1", "Irusk 2", "Karchev 1", "Sorscha 1", "Strakhov 1",
    ),
    Faction.CYGNAR: (
        "Caine 1", "Caine 2", "Darius 1", "Haley 1", "Haley 2", "Haley 3",
        "Maddox 1", "Nemo 1", "Nemo 3", "Siege 1", "Sloan 1", "Stryker 1",
        "Stryker 2",
    ),
    Faction.MERCENARIES: (
        "Cyphon 1", "Damiano 1", "Gorten 1", "MacBain 1", "Magnus 2",
        "Montador 1", "Thexus 1",
    ),
    Faction.SCYRAH: (
        "Helynna 1", "Issyria 1", "Kaelyssa 1", "Ossrum 1", "Ossyan 1", "Rahn 1",
        "Ravyn 1", "Vyros 1", "Vyros 2",
    ),
    Faction.SKORNE: (
        "Hexeris 2", "Makeda 2", "Mordikaar 1", "Morghoul 1", "Naaresh 1",
        "Rasheth 1", "Xerxis 1", "Zaal 1",
    ),
}

CASTER_FACTIONS: Dict[str, Faction] = {
    caster: faction
    for faction, casters in _CASTERS_BY_FACTION.items()
    for caster in casters
}


def faction_for(caster: str) -> Optional[Faction]:
    """Faction of a known caster name, None for typos and unknown casters."""
    return CASTER_FACTIONS.get(caster)
