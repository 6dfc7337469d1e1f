from htamin import create_app
from htamin.extensions import db
from htamin.models.user import User

app = create_app()

with app.app_context():
    # The account itself lives with the auth provider; only the profile row is managed here
    user_id = app.config.get("ADMIN_USER_ID")
    admin_email = app.config.get("ADMIN_EMAIL")
    if not user_id:
        raise SystemExit("Set ADMIN_USER_ID to the auth provider's user id")

    admin_user = db.session.get(User, user_id)
    if not admin_user:
        admin_user = User(id=user_id, email=admin_email, full_name="Admin User", is_admin=True)
        db.session.add(admin_user)
        db.session.commit()
        print(f"Created admin profile {user_id}")
    elif not admin_user.is_admin:
        admin_user.is_admin = True
        db.session.commit()
        print(f"Promoted {user_id} to admin")
    else:
        print("Admin profile already exists")
