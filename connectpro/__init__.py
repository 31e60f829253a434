# ConnectionPro application package
# Modules:
#   db.py          Secrets, Supabase client and psycopg2 query helpers
#   auth.py        Supabase Auth adapter and the Session model
#   storage.py     Local key/value storage for the navigation flags
#   gate.py        Session/onboarding navigation gate (core logic)
#   profiles.py    Profile record reads and onboarding writes
#   navigation.py  Streamlit wiring: router, page guard, logout
