from flask_sqlalchemy import SQLAlchemy
from datetime import datetime

db = SQLAlchemy()


class Puzzle(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    source = db.Column(db.String(20), default="submitted")  # "submitted" | "generated"

    # list of {"start": [x, y], "end": [x, y], "walls": [[x, y], ...]}
    boards = db.Column(db.JSON, nullable=False)

    status = db.Column(db.String(20), nullable=False)  # "solved" | "unsolvable"
    solution = db.Column(db.Text, nullable=True)  # U/D/L/R, null when unsolvable

    def to_dict(self, include_solution=True):
        data = {
            "id": self.id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "source": self.source,
            "boards": self.boards,
            "status": self.status,
            "length": len(self.solution) if self.solution is not None else None,
        }
        if include_solution:
            data["solution"] = self.solution
        return data
