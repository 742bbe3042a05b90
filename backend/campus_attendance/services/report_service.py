"""Read-only attendance views for students and teachers."""
from datetime import date
from typing import Dict, List, Optional, Tuple

from sqlalchemy import select

from campus_attendance import db
from campus_attendance.models.attendance import AttendanceRecord, AttendanceStatus
from campus_attendance.models.class_session import ClassSession, ClassStatus
from campus_attendance.models.subject import Subject
from campus_attendance.models.user import User, UserRole

ATTENDED_STATUSES = (AttendanceStatus.PRESENT, AttendanceStatus.LATE)

class ReportService:
    """Attendance history, rosters and analytics. Never mutates data."""

    @staticmethod
    def student_history(student_id: int) -> List[Dict]:
        """A student's attendance records, newest class first."""
        rows = db.session.query(AttendanceRecord, ClassSession).join(
            ClassSession, AttendanceRecord.class_id == ClassSession.id
        ).filter(
            AttendanceRecord.student_id == student_id
        ).order_by(
            ClassSession.date.desc(), ClassSession.start_time.desc()
        ).all()

        history = []
        for record, session in rows:
            item = record.to_dict()
            item['class'] = {
                'id': session.id,
                'subject_name': session.subject.name if session.subject else None,
                'date': session.date.isoformat(),
                'start_time': session.start_time,
                'end_time': session.end_time,
                'status': session.status.value
            }
            history.append(item)
        return history

    @staticmethod
    def class_roster(teacher_id: int, class_id: int) -> Tuple[Optional[List[Dict]], Optional[str], int]:
        """Every eligible student of a class with their attendance status."""
        session = db.session.get(ClassSession, class_id)
        if not session:
            return None, "Class not found", 404
        if not session.is_owned_by(teacher_id):
            return None, "You do not teach this class", 403

        students = User.query.filter_by(
            role=UserRole.STUDENT,
            course=session.course,
            semester=session.semester,
            is_active=True
        ).order_by(User.name).all()

        records = {
            record.student_id: record
            for record in AttendanceRecord.query.filter_by(class_id=class_id).all()
        }

        roster = []
        for student in students:
            if not student.is_enrolled_for(session.date):
                continue
            record = records.get(student.id)
            roster.append({
                'student': {
                    'id': student.id,
                    'name': student.name,
                    'email': student.email
                },
                'status': record.status.value if record else AttendanceStatus.ABSENT.value,
                'marked_at': record.marked_at.isoformat() if record else None,
                'marked_by': record.marked_by.to_dict() if record else None
            })
        return roster, None, 200

    @staticmethod
    def pending_classes(student: User, today: date) -> List[ClassSession]:
        """Upcoming or current classes the student has not marked yet."""
        marked_ids = select(AttendanceRecord.class_id).where(
            AttendanceRecord.student_id == student.id
        )

        return ClassSession.query.filter(
            ClassSession.course == student.course,
            ClassSession.semester == student.semester,
            ClassSession.date >= today,
            ClassSession.status.notin_([ClassStatus.CANCELLED, ClassStatus.COMPLETED]),
            ClassSession.id.notin_(marked_ids)
        ).order_by(ClassSession.date, ClassSession.start_time).all()

    @staticmethod
    def student_analytics(student: User, today: date) -> List[Dict]:
        """Per-subject attendance percentage over held classes."""
        query = ClassSession.query.filter(
            ClassSession.course == student.course,
            ClassSession.semester == student.semester,
            ClassSession.status != ClassStatus.CANCELLED,
            ClassSession.date <= today
        )
        if student.enrollment_date is not None:
            query = query.filter(ClassSession.date >= student.enrollment_date)
        sessions = query.all()

        attended_ids = {
            record.class_id
            for record in AttendanceRecord.query.filter(
                AttendanceRecord.student_id == student.id,
                AttendanceRecord.status.in_(ATTENDED_STATUSES)
            ).all()
        }

        stats = {}
        for session in sessions:
            subject_name = session.subject.name if session.subject else 'Unknown'
            entry = stats.setdefault(subject_name, {'total': 0, 'attended': 0})
            entry['total'] += 1
            if session.id in attended_ids:
                entry['attended'] += 1

        return [
            {
                'subject': subject,
                'total_classes': entry['total'],
                'attended': entry['attended'],
                'percentage': round(entry['attended'] / entry['total'] * 100, 2)
            }
            for subject, entry in sorted(stats.items())
        ]

    # =================== TEACHER REPORTS ===================

    @staticmethod
    def teacher_analytics(teacher_id: int) -> List[Dict]:
        """
        Per-subject attendance percentage across the teacher's held classes.

        The denominator is every distinct student with a record in the
        subject's classes times the number of those classes.
        """
        sessions = ClassSession.query.filter(
            ClassSession.teacher_id == teacher_id,
            ClassSession.status != ClassStatus.CANCELLED
        ).all()

        by_subject = {}
        for session in sessions:
            subject_name = session.subject.name if session.subject else 'Unknown'
            by_subject.setdefault(subject_name, []).append(session.id)

        analytics = []
        for subject, class_ids in sorted(by_subject.items()):
            records = AttendanceRecord.query.filter(
                AttendanceRecord.class_id.in_(class_ids)
            ).all()
            students = {record.student_id for record in records}
            possible = len(students) * len(class_ids)
            attended = sum(1 for record in records if record.status in ATTENDED_STATUSES)
            analytics.append({
                'subject': subject,
                'total_classes': len(class_ids),
                'students': len(students),
                'percentage': round(attended / possible * 100, 2) if possible else 0
            })
        return analytics

    @staticmethod
    def _teacher_subject_sessions(teacher_id: int, course: str, semester: int,
                                  subject: str) -> List[ClassSession]:
        return ClassSession.query.join(
            Subject, ClassSession.subject_id == Subject.id
        ).filter(
            ClassSession.teacher_id == teacher_id,
            ClassSession.course == course,
            ClassSession.semester == semester,
            ClassSession.status != ClassStatus.CANCELLED,
            Subject.name == subject
        ).order_by(ClassSession.date, ClassSession.start_time).all()

    @staticmethod
    def student_attendance_matrix(teacher_id: int, course: str, semester: int, subject: str,
                                  month: Optional[int] = None,
                                  year: Optional[int] = None) -> List[Dict]:
        """
        Attendance of every student of a course/semester across one subject.

        Limited to one calendar month when ``month`` and ``year`` are given.
        Classes held before a student enrolled show ``None`` and do not count
        toward that student's total.
        """
        sessions = ReportService._teacher_subject_sessions(teacher_id, course, semester, subject)
        if month is not None and year is not None:
            sessions = [
                session for session in sessions
                if session.date.month == month and session.date.year == year
            ]
        if not sessions:
            return []

        students = User.query.filter_by(
            role=UserRole.STUDENT,
            course=course,
            semester=semester,
            is_active=True
        ).order_by(User.name).all()

        statuses = {
            (record.student_id, record.class_id): record.status
            for record in AttendanceRecord.query.filter(
                AttendanceRecord.class_id.in_([session.id for session in sessions])
            ).all()
        }

        matrix = []
        for student in students:
            attendance = {}
            total = attended = 0
            for session in sessions:
                key = f"{session.date.isoformat()} {session.start_time}-{session.end_time}"
                if not student.is_enrolled_for(session.date):
                    attendance[key] = None
                    continue
                status = statuses.get((student.id, session.id), AttendanceStatus.ABSENT)
                attendance[key] = status.value
                total += 1
                if status in ATTENDED_STATUSES:
                    attended += 1

            matrix.append({
                'student': {
                    'id': student.id,
                    'name': student.name,
                    'email': student.email
                },
                'attendance': attendance,
                'total_classes': total,
                'attended': attended,
                'percentage': round(attended / total * 100, 2) if total else 0
            })
        return matrix

    @staticmethod
    def teacher_options(teacher_id: int) -> Dict[str, List]:
        """Distinct courses, semesters and subject names assigned to a teacher."""
        subjects = Subject.query.filter_by(teacher_id=teacher_id).all()
        return {
            'courses': sorted({subject.course for subject in subjects}),
            'semesters': sorted({subject.semester for subject in subjects}),
            'subjects': sorted({subject.name for subject in subjects})
        }

    @staticmethod
    def attendance_months(teacher_id: int, course: str, semester: int, subject: str) -> List[str]:
        """``YYYY-MM`` months in which the teacher held classes of a subject."""
        sessions = ReportService._teacher_subject_sessions(teacher_id, course, semester, subject)
        return sorted({session.date.strftime('%Y-%m') for session in sessions})
