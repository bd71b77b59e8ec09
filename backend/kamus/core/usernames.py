import secrets

ADJECTIVES = [
    "ambitious", "bashful", "brave", "calm", "cheeky", "clever", "cosmic",
    "curious", "dizzy", "eager", "fancy", "fuzzy", "gentle", "grumpy",
    "happy", "jolly", "lucky", "mellow", "nimble", "noisy", "plucky",
    "quiet", "rusty", "sleepy", "snappy", "spicy", "swift", "tidy",
    "witty", "zesty",
]

NOUNS = [
    "badger", "bison", "cobra", "comet", "dingo", "falcon", "gecko",
    "heron", "ibis", "jaguar", "koala", "lemur", "lynx", "mango",
    "marlin", "otter", "panda", "pepper", "quokka", "raven", "rhino",
    "salmon", "tapir", "tiger", "toucan", "walrus", "wombat", "yak",
    "zebra", "kancil",
]


def generate_username() -> str:
    """Random "adjective_noun_NN" handle for accounts created on first login."""
    adjective = secrets.choice(ADJECTIVES)
    noun = secrets.choice(NOUNS)
    return f"{adjective}_{noun}_{secrets.randbelow(100):02d}"
