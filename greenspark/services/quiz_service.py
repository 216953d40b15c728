"""
Quiz Service for GreenSpark Platform
Handles lessons, their quizzes, grading and one-time point awards
"""

from datetime import datetime
import logging

from greenspark.services.badge_service import award_eco_points
from greenspark.utils.error_handler import NotFoundError, ValidationError
from greenspark.utils.firestore_utils import doc_to_dict, get_document, run_transaction

logger = logging.getLogger(__name__)

LESSON_CATEGORIES = (
    'Waste Management',
    'Energy Conservation',
    'Water Conservation',
    'Biodiversity',
)

PASS_PERCENTAGE = 80
DEFAULT_QUIZ_POINTS = 10

def validate_questions(questions):
    """
    Each question needs text, a non-empty list of options and a correct answer
    """
    if not isinstance(questions, list):
        raise ValidationError("Questions must be a list", field='questions')

    validated = []
    for i, question in enumerate(questions, 1):
        if not isinstance(question, dict):
            raise ValidationError(f"Question {i} must be an object", field='questions')

        options = question.get('options')
        if not question.get('question') or not isinstance(options, list) or not options:
            raise ValidationError(f"Question {i} needs a question and at least one option", field='questions')
        if not question.get('correct_answer'):
            raise ValidationError(f"Question {i} is missing its correct answer", field='questions')

        validated.append({
            'question': question['question'],
            'options': [str(option) for option in options],
            'correct_answer': question['correct_answer']
        })

    return validated

def sanitize_quiz(quiz):
    """Strip correct answers before a quiz is shown to a learner"""
    if quiz is None:
        return None
    sanitized = dict(quiz)
    sanitized['questions'] = [
        {'question': q.get('question'), 'options': q.get('options', [])}
        for q in quiz.get('questions', [])
    ]
    return sanitized

def grade_answers(questions, answers):
    """
    Count positions where the answer equals the correct answer.
    Missing or extra answers are ignored and empty answers never match.
    """
    score = 0
    for index, question in enumerate(questions):
        if index >= len(answers):
            break
        answer = answers[index]
        if answer and answer == question.get('correct_answer'):
            score += 1
    return score

class QuizService:
    def __init__(self, db):
        self.db = db
        self.lessons_ref = db.collection('lessons')
        self.quizzes_ref = db.collection('quizzes')
        self.users_ref = db.collection('users')

    def _validate_lesson_fields(self, lesson_data, partial=False):
        filtered_data = {}
        for field in ('title', 'category', 'content'):
            value = lesson_data.get(field)
            if value is None or value == '':
                if not partial:
                    raise ValidationError("Please enter all fields for the lesson", field=field)
                continue
            filtered_data[field] = value

        if 'category' in filtered_data and filtered_data['category'] not in LESSON_CATEGORIES:
            raise ValidationError(
                f"Category must be one of: {', '.join(LESSON_CATEGORIES)}", field='category'
            )
        return filtered_data

    def _find_quiz_doc(self, lesson_id):
        for quiz_doc in self.quizzes_ref.where('lesson_id', '==', lesson_id).limit(1).stream():
            return quiz_doc
        return None

    def _get_lesson_doc(self, lesson_id):
        lesson_doc = get_document(self.lessons_ref, lesson_id)
        if lesson_doc is None:
            raise NotFoundError("Lesson not found")
        return lesson_doc

    def get_all_lessons(self):
        """
        Lesson summaries for the public catalogue
        """
        lessons = []
        for lesson_doc in self.lessons_ref.stream():
            lesson_data = lesson_doc.to_dict()
            lessons.append({
                'id': lesson_doc.id,
                'title': lesson_data.get('title'),
                'category': lesson_data.get('category')
            })
        return lessons

    def get_lesson_with_quiz(self, lesson_id):
        """
        Get a lesson with its quiz, answers removed
        """
        lesson = doc_to_dict(self._get_lesson_doc(lesson_id))
        quiz_doc = self._find_quiz_doc(lesson_id)
        quiz = sanitize_quiz(doc_to_dict(quiz_doc)) if quiz_doc else None
        return {'lesson': lesson, 'quiz': quiz}

    def get_lessons_for_management(self):
        """
        All lessons with their full quizzes (teacher/admin function)
        """
        lessons = []
        for lesson_doc in self.lessons_ref.stream():
            lesson = doc_to_dict(lesson_doc)
            quiz_doc = self._find_quiz_doc(lesson_doc.id)
            lesson['quiz'] = doc_to_dict(quiz_doc) if quiz_doc else None
            lessons.append(lesson)

        lessons.sort(key=lambda x: x.get('created_at') or datetime.min)
        return lessons

    def create_lesson(self, lesson_data, questions=None, points_awarded=DEFAULT_QUIZ_POINTS):
        """
        Create a lesson, and its quiz when questions are given
        """
        filtered_data = self._validate_lesson_fields(lesson_data or {})
        validated_questions = validate_questions(questions) if questions else []

        now = datetime.utcnow()
        filtered_data['created_at'] = now
        filtered_data['updated_at'] = now
        _, lesson_ref = self.lessons_ref.add(filtered_data)

        quiz_id = None
        if validated_questions:
            quiz_id = self._create_quiz(lesson_ref.id, validated_questions, points_awarded)

        logger.info(f"Created lesson {lesson_ref.id}: {filtered_data['title']} (quiz: {quiz_id})")

        return {
            'message': 'Lesson and quiz created successfully',
            'lesson_id': lesson_ref.id,
            'quiz_id': quiz_id
        }

    def _create_quiz(self, lesson_id, questions, points_awarded=DEFAULT_QUIZ_POINTS):
        if isinstance(points_awarded, bool) or not isinstance(points_awarded, int) or points_awarded < 0:
            raise ValidationError("points_awarded must be a non-negative integer", field='points_awarded')

        now = datetime.utcnow()
        _, quiz_ref = self.quizzes_ref.add({
            'lesson_id': lesson_id,
            'points_awarded': points_awarded,
            'questions': questions,
            'created_at': now,
            'updated_at': now
        })
        return quiz_ref.id

    def update_lesson(self, lesson_id, update_data):
        """
        Update lesson fields and replace its quiz questions.
        A quiz is created when the lesson had none.
        """
        self._get_lesson_doc(lesson_id)
        update_data = update_data or {}

        filtered_data = self._validate_lesson_fields(update_data, partial=True)
        filtered_data['updated_at'] = datetime.utcnow()
        self.lessons_ref.document(lesson_id).update(filtered_data)

        if update_data.get('questions') is not None:
            questions = validate_questions(update_data['questions'])
            quiz_doc = self._find_quiz_doc(lesson_id)
            if quiz_doc is not None:
                self.quizzes_ref.document(quiz_doc.id).update({
                    'questions': questions,
                    'updated_at': datetime.utcnow()
                })
            elif questions:
                self._create_quiz(lesson_id, questions)

        logger.info(f"Updated lesson: {lesson_id}")

        lesson = doc_to_dict(self._get_lesson_doc(lesson_id))
        quiz_doc = self._find_quiz_doc(lesson_id)
        return {'lesson': lesson, 'quiz': doc_to_dict(quiz_doc) if quiz_doc else None}

    def delete_lesson(self, lesson_id):
        """
        Delete a lesson and its quiz
        """
        self._get_lesson_doc(lesson_id)

        quiz_doc = self._find_quiz_doc(lesson_id)
        if quiz_doc is not None:
            self.quizzes_ref.document(quiz_doc.id).delete()
        self.lessons_ref.document(lesson_id).delete()

        logger.info(f"Deleted lesson {lesson_id} and its quiz")
        return {'message': 'Lesson and associated quiz deleted'}

    def submit_quiz(self, user_id, quiz_id, answers):
        """
        Grade a quiz submission. Passing (80%+) awards the quiz points the
        first time a user passes it; later passes award nothing.
        """
        if not isinstance(answers, list):
            raise ValidationError("Answers must be a list", field='answers')

        result = run_transaction(self.db, self._submit_in_transaction, user_id, quiz_id, answers)

        logger.info(f"Quiz submitted - User: {user_id}, Quiz: {quiz_id}, Score: {result['percentage']}%, Points: {result['points_awarded']}")
        return result

    def _submit_in_transaction(self, transaction, user_id, quiz_id, answers):
        quiz_doc = get_document(self.quizzes_ref, quiz_id, transaction=transaction)
        if quiz_doc is None:
            raise NotFoundError("Quiz not found")

        user_doc = get_document(self.users_ref, user_id, transaction=transaction)
        if user_doc is None:
            raise NotFoundError("User not found")

        quiz_data = quiz_doc.to_dict()
        user_data = user_doc.to_dict()
        questions = quiz_data.get('questions', [])

        score = grade_answers(questions, answers)
        total_questions = len(questions)
        percentage = (score / total_questions) * 100 if total_questions > 0 else 0
        passed = percentage >= PASS_PERCENTAGE

        passed_quizzes = list(user_data.get('passed_quizzes') or [])
        points_awarded = 0
        unlocked = []
        eco_points = user_data.get('eco_points', 0)

        if passed and quiz_id not in passed_quizzes:
            points_awarded = quiz_data.get('points_awarded', DEFAULT_QUIZ_POINTS)
            update_data, unlocked = award_eco_points(user_data, points_awarded)
            passed_quizzes.append(quiz_id)
            update_data['passed_quizzes'] = passed_quizzes
            update_data['updated_at'] = datetime.utcnow()
            transaction.update(user_doc.reference, update_data)
            eco_points = update_data['eco_points']
            message = f"Congratulations! You scored {score}/{total_questions}."
        elif passed:
            message = f"You scored {score}/{total_questions}. You have already earned the points for this quiz."
        else:
            message = f"You scored {score}/{total_questions}. Try again to earn the points!"

        return {
            'message': message,
            'score': score,
            'total_questions': total_questions,
            'percentage': round(percentage, 2),
            'passed': passed,
            'points_awarded': points_awarded,
            'eco_points': eco_points,
            'unlocked': unlocked
        }

    def seed_lessons(self):
        """
        Seed database with sample lessons and quizzes
        """
        sample_lessons = [
            {
                'title': 'Reduce, Reuse, Recycle',
                'category': 'Waste Management',
                'content': (
                    '# Reduce, Reuse, Recycle\n\n'
                    'Most household waste can be avoided, reused or recycled. '
                    'Sorting waste at the source keeps recyclables clean and out of landfill.'
                ),
                'questions': [
                    {
                        'question': 'Which bin does a banana peel belong in?',
                        'options': ['Recycle', 'Compost', 'Trash'],
                        'correct_answer': 'Compost'
                    },
                    {
                        'question': 'Which of the three Rs comes first?',
                        'options': ['Recycle', 'Reuse', 'Reduce'],
                        'correct_answer': 'Reduce'
                    }
                ]
            },
            {
                'title': 'Saving Water at Home',
                'category': 'Water Conservation',
                'content': (
                    '# Saving Water at Home\n\n'
                    'Shorter showers, fixing leaks and turning off the tap while brushing '
                    'save thousands of litres a year.'
                ),
                'questions': [
                    {
                        'question': 'How much water can a leaky faucet waste per day?',
                        'options': ['1 litre', '5 litres', 'More than 75 litres'],
                        'correct_answer': 'More than 75 litres'
                    }
                ]
            }
        ]

        for lesson in sample_lessons:
            questions = lesson.pop('questions')
            self.create_lesson(lesson, questions=questions)

        logger.info("Seeded lesson database with sample data")
        return len(sample_lessons)
