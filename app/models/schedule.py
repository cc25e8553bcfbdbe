from ..extensions import db

class TimetableEntry(db.Model):
    __tablename__ = "timetable"
    id = db.Column(db.Integer, primary_key=True)
    day = db.Column(db.String(16), nullable=False)
    period = db.Column(db.String(16), nullable=False)
    subject = db.Column(db.String(128), nullable=False)
    teacher_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)

class AttendanceRecord(db.Model):
    __tablename__ = "attendance"
    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    date = db.Column(db.Date, nullable=False)
    present = db.Column(db.Boolean, nullable=False)
    __table_args__ = (
        db.UniqueConstraint("student_id", "date", name="uq_attendance_student_date"),
    )
