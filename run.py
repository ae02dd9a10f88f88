#!/usr/bin/env python3
"""Application entry point"""
import os
import sys

def init_database():
    """Initialize the database and seed scheme prices"""
    from gsm import create_app, db
    app = create_app(os.getenv('FLASK_ENV') or 'development')
    with app.app_context():
        db.create_all()
        app.extensions['scheme_book'].seed()
        print("Database initialized!")

def create_admin_user():
    """Create the initial admin operator"""
    from gsm import create_app, db

    app = create_app(os.getenv('FLASK_ENV') or 'development')

    with app.app_context():
        # Create tables if they don't exist
        db.create_all()

        admin = app.extensions['scheme_book'].seed()
        if admin is None:
            print("Operators already exist, no admin created.")
            return

        print("Admin operator created successfully!")
        print("Username: {}".format(admin.username))
        print("Password: {}".format(app.config['INITIAL_ADMIN_PASSWORD']))
        print("Please change the password after first login!")

if __name__ == '__main__':
    # Handle command-line arguments
    if len(sys.argv) > 1:
        command = sys.argv[1]
        if command == 'create-admin':
            create_admin_user()
        elif command == 'init-db':
            init_database()
        else:
            print("Unknown command: {}".format(command))
            print("Available commands: create-admin, init-db")
            sys.exit(1)
    else:
        # Run the Flask development server
        from gsm import create_app
        app = create_app(os.getenv('FLASK_ENV') or 'development')
        app.run(host='0.0.0.0', port=5000, debug=True)
