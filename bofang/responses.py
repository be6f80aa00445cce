"""
Spoken response catalog.

Locale -> key -> template. Templates take positional str.format fields.
Unknown locales fall back to en-US.
"""

from typing import Dict
from xml.sax.saxutils import escape

DEFAULT_LOCALE = "en-US"

_EN = {
    "CURRENT": "current",
    "NEXT": "next",
    "NO_RESULTS_FOUND": "I couldn't find anything for {0}.",
    "ASK_TO_PLAY": "I found {0}. Would you like me to play it?",
    "NOW_PLAYING": "Now playing {0}.",
    "NOTHING_TO_REPEAT": "There is nothing playing right now.",
    "NOTHING_TO_RESUME": "There is nothing paused right now.",
    "REPEAT_TRIGGERED": "I'll repeat the {0} video once.",
    "LOOP_ON_TRIGGERED": "I'll keep repeating the {0} video.",
    "LOOP_OFF_TRIGGERED": "I'll stop repeating the {0} video.",
    "HELP_TRIGGERED": (
        "You can ask me to search for a video, for example: search for lofi hip hop. "
        "Once it is playing you can pause, resume, start over, repeat or loop it."
    ),
    "REQUEST_FAILED": "Sorry, I couldn't reach the video service. Please try again.",
    "DOWNLOAD_TIMEOUT": "Sorry, that video is taking too long to prepare. Say yes to try again.",
}

CATALOG: Dict[str, Dict[str, str]] = {
    "en-US": _EN,
    "en-GB": _EN,
    "de-DE": {
        "CURRENT": "aktuelle",
        "NEXT": "nächste",
        "NO_RESULTS_FOUND": "Ich konnte nichts zu {0} finden.",
        "ASK_TO_PLAY": "Ich habe {0} gefunden. Soll ich es abspielen?",
        "NOW_PLAYING": "Jetzt läuft {0}.",
        "NOTHING_TO_REPEAT": "Gerade läuft nichts.",
        "NOTHING_TO_RESUME": "Gerade ist nichts pausiert.",
        "REPEAT_TRIGGERED": "Ich wiederhole das {0} Video einmal.",
        "LOOP_ON_TRIGGERED": "Ich wiederhole das {0} Video fortlaufend.",
        "LOOP_OFF_TRIGGERED": "Ich höre auf, das {0} Video zu wiederholen.",
        "HELP_TRIGGERED": (
            "Du kannst mich bitten, nach einem Video zu suchen, zum Beispiel: suchen nach Jazz. "
            "Während es läuft, kannst du pausieren, fortsetzen, neu starten oder wiederholen."
        ),
        "REQUEST_FAILED": "Der Videodienst ist leider nicht erreichbar. Bitte versuche es noch einmal.",
        "DOWNLOAD_TIMEOUT": "Das Video braucht zu lange. Sag ja, um es erneut zu versuchen.",
    },
    "fr-FR": {
        "CURRENT": "actuelle",
        "NEXT": "suivante",
        "NO_RESULTS_FOUND": "Je n'ai rien trouvé pour {0}.",
        "ASK_TO_PLAY": "J'ai trouvé {0}. Voulez-vous que je le joue ?",
        "NOW_PLAYING": "Lecture de {0}.",
        "NOTHING_TO_REPEAT": "Rien n'est en cours de lecture.",
        "NOTHING_TO_RESUME": "Rien n'est en pause.",
        "REPEAT_TRIGGERED": "Je répéterai la vidéo {0} une fois.",
        "LOOP_ON_TRIGGERED": "Je répéterai la vidéo {0} en boucle.",
        "LOOP_OFF_TRIGGERED": "J'arrête de répéter la vidéo {0}.",
        "HELP_TRIGGERED": (
            "Vous pouvez me demander de chercher une vidéo, par exemple : cherche du jazz. "
            "Pendant la lecture, vous pouvez mettre en pause, reprendre, recommencer ou répéter."
        ),
        "REQUEST_FAILED": "Désolé, le service vidéo est injoignable. Veuillez réessayer.",
        "DOWNLOAD_TIMEOUT": "Désolé, la vidéo met trop de temps. Dites oui pour réessayer.",
    },
    "it-IT": {
        "CURRENT": "attuale",
        "NEXT": "prossimo",
        "NO_RESULTS_FOUND": "Non ho trovato niente per {0}.",
        "ASK_TO_PLAY": "Ho trovato {0}. Vuoi che lo riproduca?",
        "NOW_PLAYING": "Ora in riproduzione {0}.",
        "NOTHING_TO_REPEAT": "Non c'è niente in riproduzione.",
        "NOTHING_TO_RESUME": "Non c'è niente in pausa.",
        "REPEAT_TRIGGERED": "Ripeterò il video {0} una volta.",
        "LOOP_ON_TRIGGERED": "Ripeterò il video {0} all'infinito.",
        "LOOP_OFF_TRIGGERED": "Smetto di ripetere il video {0}.",
        "HELP_TRIGGERED": (
            "Puoi chiedermi di cercare un video, per esempio: cerca jazz. "
            "Durante la riproduzione puoi mettere in pausa, riprendere, ricominciare o ripetere."
        ),
        "REQUEST_FAILED": "Mi dispiace, il servizio video non è raggiungibile. Riprova.",
        "DOWNLOAD_TIMEOUT": "Mi dispiace, il video sta impiegando troppo. Di' sì per riprovare.",
    },
}


def message(locale: str, key: str, *args: object) -> str:
    """Look up key for locale and fill in positional args."""
    table = CATALOG.get(locale, CATALOG[DEFAULT_LOCALE])
    template = table.get(key, CATALOG[DEFAULT_LOCALE][key])
    return template.format(*args)


def to_ssml(text: str) -> str:
    """Wrap plain text in a <speak> element."""
    return "<speak>" + escape(text) + "</speak>"
