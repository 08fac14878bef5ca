# domain/scheduling/pools.py
# Fixed content the schedule draws from. Read-only for the life of the process.

GREETINGS: tuple[str, ...] = (
    "Bonjour ! J'ai bien récupéré votre colis, je suis en route 🚛",
    "Bonjour, c'est Karim votre livreur. J'arrive dans quelques minutes !",
    "Hello ! Votre colis est avec moi, j'arrive bientôt !",
)

# (text, delay_added_s) are drawn together
DELAYS: tuple[tuple[str, int], ...] = (
    ("Petit ralentissement à cause du trafic, j'ai ~2 min de retard. Désolé !", 40),
    ("Il y a des travaux sur mon trajet, je fais un détour. Quelques minutes de plus !", 35),
    ("Embouteillage imprévu... Je fais au plus vite ! 🚗", 30),
)

CALL_REASONS: tuple[str, ...] = (
    "Le livreur souhaite confirmer votre adresse",
    "Le livreur a une question sur l'accès",
    "Le livreur n'arrive pas à trouver l'entrée",
)

LATE_MESSAGES: tuple[str, ...] = (
    "Je suis presque arrivé ! Vous pouvez préparer le code de la porte ?",
    "J'arrive dans votre rue, je cherche une place pour me garer.",
    "Plus que quelques mètres, j'arrive ! 🏃",
)

ARRIVING_MESSAGES: tuple[str, ...] = (
    "Je suis en bas de chez vous ! 🏠",
    "Je suis devant la porte, je sonne !",
    "Arrivé ! Je dépose le colis maintenant.",
)

QUICK_REPLIES: tuple[str, ...] = (
    "OK merci !",
    "J'arrive !",
    "Le code est 4829A",
    "3ème étage droite",
    "Je descends",
    "Laissez chez le voisin svp",
    "Sonnez 2 fois svp",
)

# (pattern, reply), first match wins; the last one matches anything
AUTO_REPLIES: tuple[tuple[str, str], ...] = (
    (r"merci|super|ok|parfait|cool", "Pas de souci ! 👍"),
    (r"code|porte|digicode", "Noté, merci !"),
    (r"étage|escalier|ascenseur", "Compris, je monte dès que j'arrive !"),
    (r"voisin|gardien|loge", "D'accord, je ferai comme ça."),
    (r"descend|j'arrive|sors", "Parfait, je vous attends en bas !"),
    (r"sonn|interphone", "OK je sonnerai en arrivant 👍"),
    (r"retard|long|quand", "Je fais au plus vite, plus que quelques minutes !"),
    (r"(?s).*", "Bien reçu !"),
)
