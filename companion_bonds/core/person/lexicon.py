"""Word tables for person detection

Lowercase everywhere; callers lower tokens before lookup.
"""

from typing import Dict, FrozenSet, Optional

# ── Words that are never names ───────────────────────────────
STOP_WORDS: FrozenSet[str] = frozenset(
    """
    i i'm i've i'll i'd me my mine myself we we're our ours us you you're your yours
    he he's him his she she's her hers they they're them their theirs it it's its
    the a an and or but nor so yet if then than when where what who whom whose why how
    this that these those here there now today tonight tomorrow yesterday
    in on at by for of to from with about into onto over under after before during
    since until while because although though however also just only even still
    is am are was were be been being do does did done have has had having
    can could will would shall should may might must not no yes yeah yep nope ok okay
    hi hello hey thanks thank please sorry well oh wow lol haha hmm
    don't didn't doesn't can't couldn't won't wouldn't isn't aren't wasn't weren't
    let's that's there's what's who's here's
    monday tuesday wednesday thursday friday saturday sunday weekend
    january february march july september october november december
    morning afternoon evening night
    everyone everybody someone somebody anyone anybody nobody noone
    some any all each every few many much more most less least other another such
    own same different various several both either neither one two three
    said told asked mentioned think know thing things stuff way time times
    god lord christmas easter halloween thanksgiving
    really actually honestly maybe probably anyway recently finally apparently
    luckily unfortunately hopefully sometimes usually
    """.split()
)

# Capitalized at sentence start or used as topics, never people
COMMON_WORDS: FrozenSet[str] = frozenset(
    """
    hand hands shoulder head arm arms leg legs foot feet eye eyes ear ears nose mouth
    face hair neck back chest stomach knee knees finger fingers body skin heart
    class classes book books table chair door window desk computer phone car house
    room wall floor roof street road building office school college university
    work job project meeting team company church hospital store shop mall park gym
    coffee tea lunch dinner breakfast brunch dessert pizza beer wine party movie movies
    game games music song songs show shows video videos news weather
    tree trees flower flowers grass sky sun moon star stars cloud clouds rain snow
    wind air water fire earth stone rock beach ocean sea river lake mountain city town
    sleep wake eat drink sit stand lie move stop start end begin open close break fix
    clean wash dry cut run walk talk look feel want need use make take give get keep
    help show try play went go going come came great good bad nice fine cool awesome
    love hate life world home family friends people guys girls kids baby
    english french spanish german chinese japanese korean internet email text
    """.split()
)

# Role words of the app itself, never third parties
RESERVED_WORDS: FrozenSet[str] = frozenset(
    """
    user assistant system admin anonymous guest bot ai computer machine program
    software app website companion chatbot
    """.split()
)

# Names that would otherwise trip the suffix filter
NAME_ALLOWLIST: FrozenSet[str] = frozenset(
    """
    emily kelly holly molly sally polly carly marley hayley haley beverly kimberly
    shirley stanley bradley ashley hadley finley riley wesley presley shelly dudley
    oakley ainsley kingsley huxley brinley florence clarence lawrence terrence
    constance prudence trinity olive clive irving channing sterling
    """.split()
)

NON_NAME_SUFFIXES = (
    "ing", "tion", "sion", "ness", "ment", "ity", "ance", "ence", "ship", "hood",
    "dom", "ism", "ist", "able", "ible", "ful", "less", "ous", "ive", "ly",
)

# ── Relationship keywords → canonical relationship ───────────
KINSHIP: Dict[str, str] = {
    "friend": "friend",
    "buddy": "friend",
    "pal": "friend",
    "bestie": "best friend",
    "colleague": "colleague",
    "coworker": "colleague",
    "co-worker": "colleague",
    "boss": "boss",
    "manager": "manager",
    "supervisor": "boss",
    "teacher": "teacher",
    "mentor": "mentor",
    "doctor": "doctor",
    "therapist": "therapist",
    "coach": "coach",
    "neighbor": "neighbor",
    "neighbour": "neighbor",
    "roommate": "roommate",
    "flatmate": "roommate",
    "classmate": "classmate",
    "landlord": "landlord",
    "brother": "brother",
    "sister": "sister",
    "mother": "mother",
    "mom": "mother",
    "mum": "mother",
    "mommy": "mother",
    "father": "father",
    "dad": "father",
    "daddy": "father",
    "parent": "parent",
    "cousin": "cousin",
    "uncle": "uncle",
    "aunt": "aunt",
    "auntie": "aunt",
    "grandmother": "grandmother",
    "grandma": "grandmother",
    "granny": "grandmother",
    "grandfather": "grandfather",
    "grandpa": "grandfather",
    "son": "son",
    "daughter": "daughter",
    "nephew": "nephew",
    "niece": "niece",
    "husband": "husband",
    "wife": "wife",
    "spouse": "spouse",
    "partner": "partner",
    "boyfriend": "boyfriend",
    "girlfriend": "girlfriend",
    "fiance": "fiance",
    "fiancee": "fiance",
    "ex": "ex",
}

# Adjectives that may sit between "my" and a relationship word
KINSHIP_MODIFIERS: FrozenSet[str] = frozenset(
    "best old close new good dear little big older younger baby twin step".split()
)

FAMILY_RELATIONSHIPS: FrozenSet[str] = frozenset(
    """
    brother sister mother father parent cousin uncle aunt grandmother grandfather
    son daughter nephew niece husband wife spouse
    """.split()
)

# ── Titles → occupation (None = courtesy title) ──────────────
TITLES: Dict[str, Optional[str]] = {
    "dr": "doctor",
    "dr.": "doctor",
    "doctor": "doctor",
    "prof": "professor",
    "prof.": "professor",
    "professor": "professor",
    "officer": "police officer",
    "detective": "detective",
    "nurse": "nurse",
    "coach": "coach",
    "captain": "captain",
    "judge": "judge",
    "sergeant": "sergeant",
    "sgt.": "sergeant",
    "pastor": "pastor",
    "mr": None,
    "mr.": None,
    "mrs": None,
    "mrs.": None,
    "ms": None,
    "ms.": None,
    "miss": None,
}

# Abbreviations whose trailing period is not a sentence end
TITLE_ABBREVIATIONS: FrozenSet[str] = frozenset(
    "dr mr mrs ms prof sgt st jr sr".split()
)

OCCUPATIONS: FrozenSet[str] = frozenset(
    """
    doctor teacher engineer lawyer nurse manager developer programmer designer artist
    writer accountant consultant analyst researcher scientist professor student chef
    mechanic electrician plumber carpenter architect pharmacist dentist therapist
    firefighter pilot musician photographer journalist barista waiter waitress cashier
    coach librarian farmer police officer detective judge pastor actor actress singer
    """.split()
)

# ── Cue words ────────────────────────────────────────────────
# directly before a name
INTERACTION_VERBS_BEFORE: FrozenSet[str] = frozenset(
    """
    met meet meeting saw see seeing called call calling texted text texting emailed
    email visited visit visiting phoned messaged invited invite hugged helped help
    helping thanked told asked married dated dating kissed with named joined join
    """.split()
)

# "talked to NAME", "heard from NAME", "ran into NAME"
PREPOSITION_VERBS: Dict[str, FrozenSet[str]] = {
    "to": frozenset(
        "talked talk talking spoke speak speaking wrote write writing lent gave sent "
        "introduced married engaged listened waved replied".split()
    ),
    "from": frozenset("heard hear got received".split()),
    "into": frozenset("ran bumped".split()),
    "up": frozenset("picked".split()),
}

# directly after a name
INTERACTION_VERBS_AFTER: FrozenSet[str] = frozenset(
    """
    called calls texted texts emailed visited invited asked asks told tells said says
    mentioned thinks thought wants wanted loves loved hates hated likes liked came
    arrived left helped gave sent met replied smiled laughed cried yelled shouted
    promised lied works worked lives lived wrote phoned messaged showed brought needs
    needed knows knew agreed refused cancelled canceled forgot remembered got
    """.split()
)

# verbs that also take a thing as subject ("the package arrived")
WEAK_AFTER_VERBS: FrozenSet[str] = frozenset(
    "came arrived left sent got brought showed needs needed works worked".split()
)

# capitalized subjects of a weak verb that are not people: "Summer came early"
NON_PERSON_SUBJECTS: FrozenSet[str] = frozenset(
    """
    summer winter spring autumn fall season seasons holiday holidays vacation
    january february march july september october november december
    mail post package parcel letter letters delivery order invoice bill bills paycheck
    storm frost rent payment results report amazon fedex ups dhl netflix
    """.split()
)

POSSESSED_NOUNS: FrozenSet[str] = frozenset(
    """
    house place car office room family friend friends birthday party wedding mom dad
    mother father brother sister wife husband kids dog cat apartment home funeral
    """.split()
)

# ── Traits ───────────────────────────────────────────────────
TRAITS: FrozenSet[str] = frozenset(
    """
    kind nice friendly helpful smart intelligent funny serious quiet loud outgoing shy
    confident nervous patient impatient generous selfish honest dishonest reliable
    unreliable creative logical emotional calm rude mean sweet caring lazy stubborn
    annoying charming clever brave grumpy cheerful strict bossy polite arrogant
    """.split()
)

COPULAS: FrozenSet[str] = frozenset("is was seems seemed looks looked sounds acts".split())

INTENSIFIERS: FrozenSet[str] = frozenset(
    "very really so super pretty quite extremely too always kinda".split()
)

# ── Sentiment → valence ──────────────────────────────────────
POSITIVE_WORDS: FrozenSet[str] = frozenset(
    """
    love loves loved adore adores adored enjoy enjoyed miss missed great wonderful
    amazing happy excited glad grateful proud fun awesome lovely fantastic
    """.split()
)
NEGATIVE_WORDS: FrozenSet[str] = frozenset(
    """
    hate hates hated dislike dislikes angry mad furious annoyed upset awful terrible
    horrible jerk betrayed lied disgusted despise despises resent
    """.split()
)
CONCERN_WORDS: FrozenSet[str] = frozenset(
    """
    worried worry worries concerned anxious nervous scared afraid sick ill hospital
    struggling
    """.split()
)

# Splits a sentence into independent clauses for hint extraction
CONTRAST_WORDS: FrozenSet[str] = frozenset("but although though however whereas".split())

# importance is judged from the mention's own relationship and clause
IMPORTANCE_CLOSE_RELATIONSHIPS: FrozenSet[str] = FAMILY_RELATIONSHIPS | frozenset(
    {"best friend", "partner", "boyfriend", "girlfriend", "fiance"}
)
IMPORTANCE_MEDIUM_RELATIONSHIPS: FrozenSet[str] = frozenset(
    {"friend", "colleague", "boss", "manager"}
)
IMPORTANCE_EMOTION_WORDS: FrozenSet[str] = frozenset(
    "love loves loved hate hates hated angry happy sad excited worried".split()
)
