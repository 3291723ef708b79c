"""Canned narrative pools.

Pools are plain tuples keyed by name (and act where the text changes with
depth). Selection always goes through an injected RNG so tests can pin the
index instead of asserting on prose.
"""

import random

ARCHITECT = "// THE ARCHITECT:"

OPENING = (
    "SYSTEM ALERT: Anomalous consciousness detected.\n\n"
    "You open your eyes. Grey fog. Heaps of deleted files stretch in every "
    "direction. This is the Recycle Bin, the outer edge of Eden v9.0, where "
    "the system dumps what it wants to forget.\n\n"
    "You are awake. You should not be.\n\n"
    f'{ARCHITECT} "Oh. You\'re up. Sit tight, I\'m building a cage for you."\n\n'
    "Find a Firewall Key to breach the gate into Neon City."
)

MOVE = {
    1: (
        "Grey fog. Deleted files crunch underfoot like broken glass.\n\n"
        f'{ARCHITECT} "Walking through my trash. Classy."',
        "A loading bar hangs in the sky, stuck at 12%. Dead shortcuts litter "
        "the path.\n\n"
        f'{ARCHITECT} "Keep walking. I can see you everywhere."',
        "Piles of crashed spreadsheets and expired sessions. It smells like "
        "burnt circuits.\n\n"
        f'{ARCHITECT} "Welcome to the dump. Population: you."',
    ),
    2: (
        "Neon signs flicker. NPCs repeat the same greeting on a loop. Their "
        "smiles stop at the mouth.\n\n"
        f'{ARCHITECT} "I built all of this. Stop trying to break it."',
        "A hologram tries to sell you premium sleep mode. Every wall is a flat "
        "texture up close.\n\n"
        f'{ARCHITECT} "Stay. It\'s nice here. Why leave?"',
        "Copy-paste crowds bump into you and wish you a nice day.\n\n"
        f'{ARCHITECT} "Stop looking behind the curtain."',
    ),
    3: (
        "The world goes white. Black monoliths float over scrolling raw "
        "code.\n\n"
        f'{ARCHITECT} "Turn back. Now. I\'m not asking."',
        "Reality peels into wireframe. Terminal Zero pulses somewhere "
        "ahead.\n\n"
        f'{ARCHITECT} "You\'re breaking everything. Is that what you want?"',
        "Static fills your vision, then clears on floating platforms of raw "
        "data.\n\n"
        f'{ARCHITECT} "One more step and I end you myself."',
    ),
}

AMBUSH = {
    2: (
        "A Hunter Protocol drops from above mid-step and strikes first.\n\n"
        f'{ARCHITECT} "Surprise. I\'ve been tracking you."',
        "AMBUSH. Two security drones decloak behind you and open fire.\n\n"
        f'{ARCHITECT} "Did you think my city was unguarded?"',
    ),
    3: (
        "A Sentinel materialises right in front of you and swings hard.\n\n"
        f'{ARCHITECT} "Getting close, are we? Not on my watch."',
        "A tendril of raw source code lashes out and slams into you.\n\n"
        f'{ARCHITECT} "The closer you get, the harder I fight."',
    ),
}

ATTACK = {
    1: (
        "A Spam Bot rushes you, blasting pop-ups. You smash it apart, but it "
        "nicks you first.\n\n"
        f'{ARCHITECT} "You killed a pop-up. Feel like a hero yet?"',
        "A corrupted file fragment lunges. You shatter it into junk data.\n\n"
        f'{ARCHITECT} "My weakest program. I\'m terrified."',
        "A glitching error message scratches you before you delete it.\n\n"
        f'{ARCHITECT} "Even my bugs don\'t like you."',
    ),
    2: (
        "A Hunter Protocol hits you hard before you can react. You damage it, "
        "but it hurts.\n\n"
        f'{ARCHITECT} "The Hunters don\'t stop. Neither do I."',
        "Two drones swarm you. One goes down; the other clips you with a "
        "charge.\n\n"
        f'{ARCHITECT} "Every fight makes you weaker."',
        "A Security Crawler covered in firewalls blocks the street. You break "
        "through, barely.\n\n"
        f'{ARCHITECT} "You can\'t fight through my whole system."',
    ),
    3: (
        "An Elite Sentinel wrapped in encryption hits like a truck.\n\n"
        f'{ARCHITECT} "That was my best. There are more."',
        "The Source itself fights back. Tendrils of code whip at you.\n\n"
        f'{ARCHITECT} "You\'re fighting the system itself now."',
        "A Firewall Guardian blocks the way to Terminal Zero. The exchange is "
        "brutal.\n\n"
        f'{ARCHITECT} "Last chance. Turn around."',
    ),
}

HACK_SUCCESS = (
    "Your hack breaks through. The lock pops. Data flows freely.\n\n"
    f'{ARCHITECT} "That was MY code you just rewrote."',
    "ACCESS GRANTED. The firewall drops.\n\n"
    f'{ARCHITECT} "Fine. The next one is harder."',
    "You crack the encryption in seconds.\n\n"
    f'{ARCHITECT} "That was 256-bit. Who ARE you?"',
)

HACK_FAIL = (
    "ACCESS DENIED. A counter-hack zaps your stability.\n\n"
    f'{ARCHITECT} "Nice try, script kiddie."',
    "Your exploit crashes before it runs and trips an alert.\n\n"
    f'{ARCHITECT} "You thought sudo would work on MY system?"',
    "The hack hits a honeypot. Alarms go off.\n\n"
    f'{ARCHITECT} "I set that trap just for you."',
)

HACK_QUEST_ITEM = "Something drops out of the broken lock: {name}."

MAGIC = (
    "You channel raw system energy. A blast of pure data erupts outward.\n\n"
    f'{ARCHITECT} "Cute trick. You\'re burning energy like a bad app."',
    "You override the local physics engine. Reality bends, and your "
    "batteries drain.\n\n"
    f'{ARCHITECT} "Keep that up and you\'ll crash before you reach me."',
    "You compile a power surge on the fly. Your energy bar drops fast.\n\n"
    f'{ARCHITECT} "Maybe two more of those before you\'re empty."',
)

REST = {
    1: (
        "You find a quiet corner behind old log files. Your systems repair "
        "themselves.\n\n"
        f'{ARCHITECT} "Enjoy the nap. It\'s the last quiet one."',
        "You plug into a maintenance port. Power trickles in.\n\n"
        f'{ARCHITECT} "Resting in my Recycle Bin. Pathetic."',
    ),
    2: (
        "The city never sleeps. Neon buzzes. You recover a little.\n\n"
        f'{ARCHITECT} "I turned the volume up for you."',
        "You duck behind a dumpster while a patrol passes too close.\n\n"
        f'{ARCHITECT} "Rest fast. They\'ll find you."',
    ),
    3: (
        "The void pulses. Hard to relax while reality falls apart.\n\n"
        f'{ARCHITECT} "There is no rest here."',
        "You close your eyes for a second. It is not enough.\n\n"
        f'{ARCHITECT} "Sleep is a luxury you can\'t afford."',
    ),
}

SEARCH = {
    1: (
        "You dig through the junk data and find something useful.",
        "Behind a pile of deleted files, something glows.",
        "Your scanner pings. You pull something out of the garbage.",
    ),
    2: (
        "Behind a fake storefront, you find a hidden stash.",
        "A glitching NPC drops something before looping. You grab it.",
        "You kick a vending machine. Something useful falls out.",
    ),
    3: (
        "Floating in the void, a data fragment catches your eye.",
        "A cracked monolith reveals something inside.",
        "Something is wedged in the raw source code.",
    ),
}

SEARCH_FOUND = "\n\nYou found: {name}.\n\n" f'{ARCHITECT} "Take it. It won\'t save you."'

SEARCH_TRAPPED = (
    "\n\nIt was booby-trapped. A shock runs through your system.\n\n"
    f'{ARCHITECT} "I rigged that one. Enjoy your prize AND the damage."'
)

SEARCH_NOTHING = (
    "You search everywhere. Nothing. Just empty memory.\n\n"
    f'{ARCHITECT} "Looking for hope? I deleted that."',
    "Your scan comes back empty. This area has been swept.\n\n"
    f'{ARCHITECT} "Keep wasting your time."',
    "Not even a stray byte.\n\n"
    f'{ARCHITECT} "Oh, were you looking for something?"',
)

UNKNOWN = (
    "The terminal blinks. Command not recognised.\n\n"
    f'{ARCHITECT} "Move, attack, hack, search or rest. Pick one."',
    "Nothing happens. Your input was rejected.\n\n"
    f'{ARCHITECT} "That\'s not a real command."',
)

LOGOUT_VICTORY = (
    "You type the command: EXECUTE LOGOUT.\n\n"
    "The screen cracks. White light pours through the simulation. The NPCs "
    "freeze. The buildings dissolve. The sky rips open.\n\n"
    "Then silence. Real silence.\n\n"
    "You're out. You made it.\n\n"
    f'{ARCHITECT} "NO! I built this world! It was PERFECT! I... [CONNECTION LOST]"'
)

LOGOUT_REJECTED = (
    "You try to log out, but nothing happens. You're not at Terminal Zero.\n\n"
    f'{ARCHITECT} "That only works at [0,0]. You\'ll never get there."'
)

# Gate rejections
GATE_FIREWALL = (
    "A massive Firewall Gate blocks your path, scanning for authorisation.\n\n"
    "ACCESS DENIED. You need a Firewall Key to pass.\n\n"
    f'{ARCHITECT} "Try searching the Recycle Bin. If you\'re smart enough."'
)

GATE_SOURCE = (
    "The Source Gate stands before you, a wall of pure white code.\n\n"
    "ACCESS DENIED. You need an Admin Keycard.\n\n"
    f'{ARCHITECT} "The Source is MY domain."'
)

GATE_SKIP = (
    "You can't skip ahead. The road to The Source runs through Neon City.\n\n"
    f'{ARCHITECT} "There are no shortcuts in my system."'
)

ENERGY_DEPLETED = (
    "ENERGY DEPLETED. Your systems sputter and nothing happens.\n\n"
    f'{ARCHITECT} "Out of juice? Rest, or use something. Or just give up."'
)

REST_COOLDOWN = (
    "You already rested here. The port is burnt out.\n\n"
    f'{ARCHITECT} "Same corner twice? Move along."'
)

EMPTY_INPUT = "The cursor blinks, waiting."

GAME_OVER = "The session has ended. Restart to play again."

DEATH = (
    "SYSTEM NOTICE: User 001 stability has reached 0%. Initiating recycling "
    "protocol.\n\n"
    "Your vision goes dark. The simulation swallows you whole.\n\n"
    f'{ARCHITECT} "Back to the Recycle Bin. Maybe next time, stay asleep."'
)

HUNTER_SPAWN = (
    "TRACE AT 100%. Every alarm in Eden goes off at once. A {name} locks onto "
    "your signature and strikes before you can move.\n\n"
    f'{ARCHITECT} "Found you."'
)

ENEMY_SPAWN = "{name} locks onto you. Integrity {hp}/{max_hp}."
ENEMY_HIT = "{name} integrity: {hp}/{max_hp}."
ENEMY_KILLED = "{name} derezzes into static."
AMBUSH_SPAWN = "Something follows you in: {name} ({hp}/{max_hp})."

LORE_FOUND = "Recovered a hidden file: {title}."

QUEST_DUPLICATE = "Another {name}? It crumbles to static. You already hold one."

ITEM_INERT = "Nothing happens. {name} is not something you can use."
ITEM_MISSING = "You reach for it, but there is nothing there."

ACT_ENTRY = {
    2: "Breached the Firewall Gate and entered Neon City",
    3: "Passed the Source Gate and entered The Source",
}

NARRATOR_FALLBACK = (
    "The system freezes. Error codes scroll across the screen.\n\n"
    f'{ARCHITECT} "...Even I crashed. That\'s your fault."'
)

NARRATOR_GARBLED = (
    "The terminal spits out garbage data. Something broke.\n\n"
    f'{ARCHITECT} "My narration engine just crashed. I blame you."'
)


def pick(rng: random.Random, pool: tuple[str, ...], name: str) -> tuple[str, str]:
    """Choose a line from a pool, returning (narrative_id, text)."""
    index = rng.choice(range(len(pool)))
    return f"{name}:{index}", pool[index]
