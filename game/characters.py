"""
Playable characters and their traits
"""

from collections import namedtuple

# speed: movement multiplier, stamina: sprint endurance,
# battery: flashlight drain factor (lower is better), stealth: noise (lower is better)
CharacterTraits = namedtuple('CharacterTraits', ['speed', 'stamina', 'battery', 'stealth', 'description'])

CHARACTER_TRAITS = {
    'Abdullah': CharacterTraits(1.0, 1.0, 1.0, 1.0, "Balanced: good at everything."),
    'Hamza': CharacterTraits(1.3, 1.2, 1.5, 1.2, "The runner: very fast but burns through the battery."),
    'Al-Ayham': CharacterTraits(0.9, 0.8, 0.5, 1.0, "The techie: the battery lasts ages, but he is slow."),
    'Abdulhamid': CharacterTraits(1.1, 0.7, 1.0, 1.0, "The adventurer: quick on his feet, short on stamina."),
    'Abdulwahab': CharacterTraits(0.9, 1.0, 1.0, 0.5, "The ghost: quiet steps, hard for Falah to hear."),
    'Mohammed Al-Azwani': CharacterTraits(1.05, 1.1, 0.9, 1.1, "Tactical: solid all round with a small battery edge."),
    'Qais': CharacterTraits(1.15, 1.3, 1.2, 1.5, "The reckless one: fast and tireless, but loud."),
    'Mohammed Nabil': CharacterTraits(0.85, 0.9, 0.7, 0.8, "The careful one: slow, saves battery, barely makes a sound."),
    'Munther': CharacterTraits(1.0, 1.5, 1.1, 0.9, "The enduring one: built for long sprints."),
}

CHARACTERS = list(CHARACTER_TRAITS)

DEFAULT_CHARACTER = 'Abdullah'


def get_traits(name):
    """Traits for a character, falling back to the balanced default"""
    return CHARACTER_TRAITS.get(name, CHARACTER_TRAITS[DEFAULT_CHARACTER])


def other_characters(selected):
    """Everyone except the selected character, in roster order"""
    return [name for name in CHARACTERS if name != selected]
