"""Closed tag / content-warning vocabulary, plus the built-in copy used when the catalog cannot supply one."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Vocabulary:
    """Normalized labels the language model is allowed to answer with."""

    tags: tuple[str, ...] = ()
    content_warnings: tuple[str, ...] = ()

    @classmethod
    def builtin(cls) -> "Vocabulary":
        return cls(tags=DEFAULT_TAGS, content_warnings=DEFAULT_CONTENT_WARNINGS)


DEFAULT_TAGS: tuple[str, ...] = (
    "20th century",
    "abduction",
    "actor hero",
    "african-american",
    "age gap",
    "age play",
    "aliens",
    "alpha male",
    "american civil war",
    "amish",
    "anal sex",
    "ancient times",
    "angels",
    "angst",
    "aristo/royal heroine",
    "arranged/forced marriage",
    "asexual hero",
    "asexual heroine",
    "athlete hero",
    "athlete heroine",
    "bad boys",
    "baseball",
    "basketball",
    "bdsm",
    "bear shifter",
    "best friend's parent",
    "betrayal",
    "biker hero",
    "bisexuality",
    "black mc",
    "bodyguard/protector hero",
    "bodyguard/protector heroine",
    "bondage",
    "boss & employee",
    "breeding",
    "buddhist",
    "bw/wm",
    "caretaking",
    "ceo/tycoon hero",
    "cheating",
    "cheerful/happy heroine",
    "childfree",
    "christian",
    "christmas",
    "class difference",
    "college",
    "competent heroine",
    "consensual non-consent",
    "contemporary",
    "cowboy hero",
    "creative anatomy",
    "criminal heroine",
    "cruel hero/bully",
    "curvy heroine",
    "dad-bod hero",
    "daddy kink",
    "dangerous heroine",
    "dark romance",
    "demisexual hero",
    "demisexual heroine",
    "demons",
    "disabilities & scars",
    "double anal",
    "double penetration",
    "double vaginal",
    "dragon shifter",
    "dual pov",
    "dystopian",
    "east asian mc",
    "enemies to lovers",
    "exhibitionism",
    "fae",
    "fake relationship",
    "famous heroine",
    "fantasy",
    "fated mates",
    "fem-dom",
    "female rake",
    "fetish",
    "fff+",
    "fighter hero",
    "fighting/mma/boxing",
    "first person pov",
    "football",
    "forbidden love",
    "forced proximity",
    "found family",
    "friends to lovers",
    "friends with benefits",
    "funny",
    "futuristic",
    "gay romance",
    "georgian",
    "gifted/super-heroine",
    "good grovel",
    "grumpy & sunshine",
    "grumpy/cold hero",
    "grumpy/ice queen",
    "harem",
    "height difference",
    "high fantasy",
    "high school",
    "highlander hero",
    "himbo",
    "hindu",
    "historical",
    "hockey",
    "horror",
    "hurt/comfort",
    "ice/figure skating",
    "independent heroine",
    "indigenous mc",
    "insta-love",
    "jewish",
    "latinx mc",
    "lesbian romance",
    "lion shifter",
    "love triangle",
    "m-f romance",
    "mafia",
    "magic",
    "male pov",
    "marriage of convenience",
    "medieval",
    "men in uniform",
    "menage",
    "mff",
    "mfm",
    "military",
    "mmf",
    "mmm+",
    "monsters",
    "multicultural",
    "muslim",
    "mystery",
    "nerdy hero",
    "neurodivergent mc",
    "new adult",
    "non-binary romance",
    "non-human hero",
    "non-human heroine",
    "older/mature",
    "omegaverse",
    "orcs",
    "other man/woman",
    "pagan",
    "paranormal",
    "parent's best friend",
    "pegging",
    "pirate hero",
    "plain heroine",
    "political/court intrigue",
    "politician hero",
    "poly (3+ people)",
    "poor heroine",
    "possessive hero",
    "praise kink",
    "pregnancy",
    "primal/chase play",
    "queer awakening",
    "queer romance",
    "regency",
    "reverse harem",
    "rich hero",
    "rich heroine",
    "rockstar hero",
    "royal hero",
    "sassy heroine",
    "science fiction",
    "second chances",
    "secret child",
    "secret relationship",
    "shapeshifters",
    "sheik",
    "short king",
    "shy hero",
    "shy heroine",
    "sibling's best friend",
    "silver fox",
    "single father",
    "single mother",
    "slavery",
    "sleuth heroine",
    "slow burn",
    "small town",
    "soccer",
    "somnophilia",
    "south asian/desi",
    "southeast asian mc",
    "spanking",
    "sports",
    "steampunk",
    "step siblings",
    "sunny/happy hero",
    "superheroes",
    "survival",
    "suspense",
    "sweet/gentle hero",
    "sweet/gentle heroine",
    "take-charge heroine",
    "tall heroine",
    "teacher/coach hero",
    "teacher/coach heroine",
    "third person pov",
    "tiger shifter",
    "time travel",
    "tortured hero",
    "tortured heroine",
    "trans hero",
    "trans heroine",
    "tudors & stuarts",
    "urban fantasy",
    "vampires",
    "vengeance",
    "victorian",
    "viking hero",
    "virgin hero",
    "virgin heroine",
    "war",
    "warlord/commander hero",
    "warrior heroine",
    "werewolves",
    "western",
    "western frontier",
    "white collar heroine",
    "witches",
    "working class hero",
    "working class heroine",
    "workplace/office",
    "young adult",
)

DEFAULT_CONTENT_WARNINGS: tuple[str, ...] = (
    "ableism",
    "abuse",
    "abuse between mcs",
    "alcoholism",
    "animal abuse",
    "animal death",
    "birth-control non-consent",
    "body betrayal",
    "child death",
    "child sexual abuse",
    "death / grief",
    "drug abuse",
    "dubious consent",
    "eating disorders",
    "fatphobia",
    "forced pregnancy",
    "gambling",
    "graphic violence",
    "human trafficking",
    "incest",
    "mental illness",
    "mental trauma",
    "miscarriage / infertility",
    "misogyny",
    "no hea",
    "non-consent between mcs",
    "nontraditional hea",
    "past abuse",
    "past child abuse",
    "past child neglect",
    "past sexual abuse",
    "queerphobia",
    "racism",
    "rape",
    "religious trauma",
    "self harm",
    "slut shaming",
    "substance abuse",
    "suicide / ideation",
    "terminal illness",
    "third party abuse",
    "third party sexual assault",
    "torture of mcs",
    "torture of side characters",
    "victim blaming",
)
