import logging
import random
from datetime import date, time, timedelta
import click
from flask import Flask, jsonify
from flask.cli import with_appcontext
from flask_cors import CORS
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from .extensions import db, migrate
from .config import Config
from .errors import ReservationError, StoreFailure
from .http import jerror
from .blueprints.reservations import bp as reservations_bp
from .blueprints.tables import bp as tables_bp
from .models import DiningTable, Reservation, reservation_tables
from .schemas import ReservationRequest
from .services import reservation_service

def create_app(overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.logger.setLevel(app.config["LOG_LEVEL"])

    CORS(app)

    db.init_app(app)
    migrate.init_app(app, db)

    app.register_blueprint(reservations_bp, url_prefix="/api/reservations")
    app.register_blueprint(tables_bp, url_prefix="/api/tables")

    @app.errorhandler(ReservationError)
    def reservation_error(e: ReservationError):
        if isinstance(e, StoreFailure):
            app.logger.error("%s: %s", e.code, e.message)
        else:
            app.logger.info("Rejected with %s: %s", e.code, e.message)
        return jerror(e.status, e.code, e.message, e.details)

    @app.errorhandler(SQLAlchemyError)
    def store_error(e: SQLAlchemyError):
        db.session.rollback()
        app.logger.exception("Unhandled store error")
        return jerror(503, StoreFailure.code, "The reservation store is unavailable.")

    @app.get("/health")
    def health():
        return jsonify(status="ok")

    @click.command("seed")
    @click.option("--tables", "table_count", default=12, show_default=True, help="Number of tables to create.")
    @click.option("--reservations", "reservation_count", default=35, show_default=True, help="Reservations to attempt.")
    @with_appcontext
    def seed_command(table_count, reservation_count):
        """Creates sample tables and reservations."""
        db.session.execute(delete(reservation_tables))
        db.session.query(Reservation).delete()
        db.session.query(DiningTable).delete()
        db.session.commit()
        print("Cleared existing data.")

        tables = [
            DiningTable(number=f"T{i + 1:02d}", capacity=random.choice([2, 2, 4, 4, 6, 8]), is_available=True)
            for i in range(table_count)
        ]
        db.session.add_all(tables)
        db.session.commit()
        print(f"Created {len(tables)} tables.")

        service = reservation_service()
        created = rejected = 0
        today = date.today()
        for i in range(reservation_count):
            table = random.choice(tables)
            booking = ReservationRequest(
                name=f"Customer {i + 1}",
                email=f"customer{i % 10 + 1}@example.com",
                phone=f"123-555-{i:04d}",
                date=today + timedelta(days=random.randint(0, 2)),
                time=time(random.randint(17, 22), random.choice([0, 30])),
                guests=random.randint(1, table.capacity),
                tables=[table.id],
            )
            try:
                service.create(booking)
                created += 1
            except ReservationError as e:
                rejected += 1
                app.logger.debug("Seed reservation %d rejected: %s", i + 1, e.message)

        print(f"Created {created} reservations ({rejected} rejected by admission).")
        print("Database seeded!")

    app.cli.add_command(seed_command)

    return app
