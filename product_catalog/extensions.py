from flask_sqlalchemy import SQLAlchemy

# Writes go through ProductStore.save, so reads never flush pending changes.
db = SQLAlchemy(session_options={"autoflush": False, "expire_on_commit": False})
