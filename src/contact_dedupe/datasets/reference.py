from __future__ import annotations

import random

from contact_dedupe.models import ContactRecord

_FIRST_NAMES = [
    "Jean",
    "Marie",
    "Awa",
    "Koffi",
    "Aminata",
    "Yao",
    "Fatou",
    "Ibrahim",
    "Claire",
    "Moussa",
]
_LAST_NAMES = [
    "Dupont",
    "Koné",
    "Traoré",
    "Kouassi",
    "Bamba",
    "Diallo",
    "Martin",
    "N'Guessan",
]
_DOMAINS = ["gmail.com", "yahoo.fr", "outlook.com", "orange.ci"]
_MOBILE_PREFIXES = ["01", "05", "07"]


class ReferenceDatasetGenerator:
    """Generate synthetic contacts (with intentional dupes) for tests and benchmarks."""

    def __init__(self, seed: int = 7) -> None:
        self._rng = random.Random(seed)

    def generate(self, size: int, duplicate_rate: float = 0.15) -> list[ContactRecord]:
        if size <= 0:
            return []

        records: list[ContactRecord] = []
        unique_count = int(size * (1.0 - duplicate_rate))
        unique_count = max(1, min(unique_count, size))

        for i in range(unique_count):
            records.append(self._contact(i))

        while len(records) < size:
            source = self._rng.choice(records[:unique_count])
            records.append(self._perturb(source, f"contact_{len(records):07d}"))

        self._rng.shuffle(records)
        return records

    def _contact(self, idx: int) -> ContactRecord:
        first_name = self._rng.choice(_FIRST_NAMES)
        last_name = self._rng.choice(_LAST_NAMES)
        local = f"{first_name}.{last_name}{idx % 97}".lower().replace("'", "")
        phone = f"{self._rng.choice(_MOBILE_PREFIXES)}{idx % 100000000:08d}"
        return ContactRecord(
            id=f"contact_{idx:07d}",
            name=f"{first_name} {last_name}",
            email=f"{local}@{self._rng.choice(_DOMAINS)}",
            phone=phone if self._rng.random() < 0.9 else None,
            attributes={"role": self._rng.choice(["locataire", "proprietaire", "acquereur", "prospect"])},
        )

    def _perturb(self, source: ContactRecord, new_id: str) -> ContactRecord:
        name, email, phone = source.name, source.email, source.phone
        mutation = self._rng.choice(["name", "email", "phone", "mixed"])

        if mutation in {"name", "mixed"}:
            name = self._name_variant(name)
        if mutation in {"email", "mixed"}:
            email = self._email_variant(email)
        if mutation in {"phone", "mixed"} and phone:
            phone = self._phone_variant(phone)

        return ContactRecord(
            id=new_id,
            name=name,
            email=email,
            phone=phone,
            attributes=dict(source.attributes),
        )

    def _name_variant(self, name: str) -> str:
        parts = name.split()
        variant = self._rng.choice(["reverse", "typo", "case"])
        if variant == "reverse" and len(parts) >= 2:
            return " ".join(reversed(parts))
        if variant == "typo" and len(name) > 4:
            drop_at = self._rng.randrange(1, len(name) - 1)
            return name[:drop_at] + name[drop_at + 1 :]
        return name.upper()

    def _email_variant(self, email: str) -> str:
        if "@" not in email:
            return email
        local, domain = email.split("@", maxsplit=1)
        variant = self._rng.choice(["domain", "dot", "case"])

        if variant == "domain":
            other_domains = [d for d in _DOMAINS if d != domain]
            return f"{local}@{self._rng.choice(other_domains)}"
        if variant == "dot" and "." in local:
            return f"{local.replace('.', '', 1)}@{domain}"
        return f"{local.capitalize()}@{domain}"

    def _phone_variant(self, phone: str) -> str:
        digits = "".join(ch for ch in phone if ch.isdigit())
        pairs = " ".join(digits[i : i + 2] for i in range(0, len(digits), 2))
        return self._rng.choice([f"+225 {pairs}", pairs, f"00225{digits}"])
