from golf_scorer import create_app
from golf_scorer.extensions import db
from golf_scorer.utils.settings_store import seed_default_settings

app = create_app()

with app.app_context():
    db.create_all()
    seed_default_settings()
    inspector = db.inspect(db.engine)
    print("Existing tables:", inspector.get_table_names())
    print("✅ Database created successfully.")
