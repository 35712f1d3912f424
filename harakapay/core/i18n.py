"""Translation catalogues and language resolution.

The active language is always passed in explicitly; nothing here keeps a
"current language".
"""

import re

SUPPORTED_LANGUAGES = ("fr", "en")
FALLBACK_LANGUAGE = "fr"

LOCALES = {
    "fr": "fr-FR",
    "en": "en-US",
}

CATALOGUES = {
    "fr": {
        "common": {
            "retry": "Réessayer",
            "ok": "OK",
            "error": "Erreur",
        },
        "auth": {
            "errors": {
                "invalid_phone": "Le numéro doit contenir exactement 9 chiffres.",
            },
            "password_reset_sent": "Un email de réinitialisation a été envoyé.",
            "password_updated": "Votre mot de passe a été mis à jour.",
        },
        "notifications": {
            "empty": {
                "no_notifications": {
                    "title": "Aucune notification",
                    "message": "Vous n'avez aucune notification pour le moment.",
                    "action": "Actualiser",
                },
            },
        },
        "dashboard": {
            "greeting": "Bonjour, {{name}}",
            "empty": {
                "no_children": {
                    "title": "Aucun enfant lié",
                    "message": "Liez votre enfant pour consulter ses frais et effectuer des paiements.",
                    "action": "Lier un enfant",
                },
            },
        },
        "student": {
            "grade": "Classe {{grade}}",
            "unknown_first_name": "Inconnu",
            "unknown_last_name": "Élève",
            "empty": {
                "no_fees": {
                    "title": "Aucun frais",
                    "message": "Aucun frais n'est assigné à cet élève pour l'année en cours.",
                    "action": "Actualiser",
                },
            },
            "payment_options": {
                "one_time": "Paiement unique",
                "recurring": "Paiement récurrent",
            },
        },
        "payment": {
            "months": {
                "september": "Septembre",
                "october": "Octobre",
                "november": "Novembre",
                "december": "Décembre",
                "january": "Janvier",
                "february": "Février",
                "march": "Mars",
                "april": "Avril",
                "may": "Mai",
                "june": "Juin",
            },
            "errors": {
                "invalid_phone": "Veuillez saisir un numéro de téléphone valide (ex. 0812345678).",
                "invalid_amount": "Veuillez saisir un montant valide.",
                "month_required": "Veuillez sélectionner un mois.",
                "failed": "Le paiement a échoué. Veuillez réessayer.",
            },
            "status": {
                "completed": "Terminé",
                "pending": "En attente",
                "failed": "Échoué",
                "unknown": "Inconnu",
            },
            "empty": {
                "no_payments": {
                    "title": "Aucun paiement",
                    "message": "Les paiements effectués pour cet élève apparaîtront ici.",
                    "action": "Payer maintenant",
                },
            },
        },
    },
    "en": {
        "common": {
            "retry": "Try again",
            "ok": "OK",
            "error": "Error",
        },
        "auth": {
            "errors": {
                "invalid_phone": "The number must contain exactly 9 digits.",
            },
            "password_reset_sent": "A password reset email has been sent.",
            "password_updated": "Your password has been updated.",
        },
        "notifications": {
            "empty": {
                "no_notifications": {
                    "title": "No notifications",
                    "message": "You have no notifications right now.",
                    "action": "Refresh",
                },
            },
        },
        "dashboard": {
            "greeting": "Hello, {{name}}",
            "empty": {
                "no_children": {
                    "title": "No children linked",
                    "message": "Link your child to view their fees and make payments.",
                    "action": "Link a child",
                },
            },
        },
        "student": {
            "grade": "Grade {{grade}}",
            "unknown_first_name": "Unknown",
            "unknown_last_name": "Student",
            "empty": {
                "no_fees": {
                    "title": "No fees",
                    "message": "No fees are assigned to this student for the current year.",
                    "action": "Refresh",
                },
            },
            "payment_options": {
                "one_time": "One-time payment",
                "recurring": "Recurring payment",
            },
        },
        "payment": {
            "months": {
                "september": "September",
                "october": "October",
                "november": "November",
                "december": "December",
                "january": "January",
                "february": "February",
                "march": "March",
                "april": "April",
                "may": "May",
                "june": "June",
            },
            "errors": {
                "invalid_phone": "Please enter a valid phone number (e.g. 0812345678).",
                "invalid_amount": "Please enter a valid amount.",
                "month_required": "Please select a month.",
                "failed": "Payment failed. Please try again.",
            },
            "status": {
                "completed": "Completed",
                "pending": "Pending",
                "failed": "Failed",
                "unknown": "Unknown",
            },
            "empty": {
                "no_payments": {
                    "title": "No payments yet",
                    "message": "Payments made for this student will appear here.",
                    "action": "Pay now",
                },
            },
        },
    },
}

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")


def normalize_language(language: str | None) -> str:
    if not language:
        return FALLBACK_LANGUAGE
    primary = language.strip().lower().replace("_", "-").split("-")[0]
    return primary if primary in SUPPORTED_LANGUAGES else FALLBACK_LANGUAGE


def locale_for(language: str | None) -> str:
    return LOCALES["fr"] if normalize_language(language) == "fr" else LOCALES["en"]


def _lookup(language: str, key: str):
    node = CATALOGUES.get(language, {})
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node if isinstance(node, str) else None


def translate(key: str, language: str | None, **params) -> str:
    """Translate ``namespace.path.to.key``; falls back to French, then to the key."""
    text = _lookup(normalize_language(language), key)
    if text is None:
        text = _lookup(FALLBACK_LANGUAGE, key)
    if text is None:
        return key
    return _PLACEHOLDER.sub(lambda m: str(params.get(m.group(1), m.group(0))), text)


def resolve_language(saved: str | None, accept_language: str | None = None) -> str:
    """Saved preference first, then the first supported Accept-Language tag."""
    if saved and saved in SUPPORTED_LANGUAGES:
        return saved
    if accept_language:
        for part in accept_language.split(","):
            tag = part.split(";")[0].strip().lower()
            primary = tag.split("-")[0]
            if primary in SUPPORTED_LANGUAGES:
                return primary
    return FALLBACK_LANGUAGE
