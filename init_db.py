# =============================================================================
# 🧩 init_db.py
# -----------------------------------------------------------------------------
# Initialisiert die Datenbank:
#   - Erstellt alle Tabellen (User, SavedPayload)
#   - Optional: Erstellt einen Demo-Benutzer (INIT_DEMO_USER=1)
# =============================================================================

import os

from database import Base, engine, SessionLocal
from models import User, SavedPayload  # noqa: F401  (Tabellen registrieren)
from auth_utils import password_hash


def main() -> None:
    # 🔹 Schritt 1 – Tabellen anlegen
    print("🛠️ Erstelle Tabellen in der Datenbank...")
    Base.metadata.create_all(bind=engine)
    print("✅ Tabellen wurden erfolgreich erstellt.\n")

    if os.getenv("INIT_DEMO_USER", "0") not in {"1", "true", "yes"}:
        return

    # 🔹 Schritt 2 – Demo-Benutzer prüfen / anlegen
    demo_email = os.getenv("INIT_DEMO_EMAIL", "demo@example.com")
    demo_password = os.getenv("INIT_DEMO_PASSWORD", "demo1234")

    db = SessionLocal()
    try:
        if db.query(User).filter(User.email == demo_email).first():
            print("  ✔️ Demo-Benutzer existiert bereits.")
            return
        db.add(User(username="demo", email=demo_email, password_hash=password_hash(demo_password)))
        db.commit()
        print(f"  🆕 Demo-Benutzer erstellt: {demo_email}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
