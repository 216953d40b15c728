import io
import os
from datetime import datetime


class TestMediaEndpoints:

    def test_video_with_url(self, client, teacher):
        teacher_id, headers = teacher
        response = client.post('/api/media/videos', headers=headers, json={
            'title': 'Ocean Plastic', 'description': 'Short film', 'url': 'https://video.example.com/1'
        })

        assert response.status_code == 201
        data = response.get_json()
        assert data['url'] == 'https://video.example.com/1'
        assert data['uploaded_by'] == teacher_id

        listed = client.get('/api/media/videos').get_json()
        assert [v['title'] for v in listed] == ['Ocean Plastic']
        assert client.get(f"/api/media/videos/{data['id']}").status_code == 200

    def test_video_missing_description(self, client, teacher):
        _, headers = teacher
        response = client.post('/api/media/videos', headers=headers, json={
            'title': 'No description', 'url': 'https://video.example.com/2'
        })
        assert response.status_code == 400

    def test_book_file_upload(self, client, admin, app):
        _, headers = admin
        response = client.post('/api/media/books', headers=headers, data={
            'title': 'Green Guide',
            'description': 'Handbook',
            'file': (io.BytesIO(b'%PDF-1.4 fake'), 'Green Guide.PDF'),
        }, content_type='multipart/form-data')

        assert response.status_code == 201
        file_url = response.get_json()['file_url']
        assert file_url.startswith('/uploads/')
        assert file_url.endswith('.pdf')

        stored_name = file_url.rsplit('/', 1)[1]
        assert stored_name[:-4].isdigit()
        assert os.path.exists(os.path.join(app.config['UPLOAD_FOLDER'], stored_name))

        download = client.get(file_url)
        assert download.status_code == 200
        assert download.data == b'%PDF-1.4 fake'

    def test_rejected_upload_leaves_no_file(self, client, teacher, app):
        _, headers = teacher
        response = client.post('/api/media/videos', headers=headers, data={
            'title': 'No description',
            'file': (io.BytesIO(b'fake video'), 'clip.mp4'),
        }, content_type='multipart/form-data')

        assert response.status_code == 400
        assert os.listdir(app.config['UPLOAD_FOLDER']) == []

    def test_rejected_update_keeps_upload_folder_clean(self, client, admin, app):
        _, headers = admin
        created = client.post('/api/media/books', headers=headers, json={
            'title': 'Green Guide', 'file_url': 'https://books.example.com/guide.pdf'
        }).get_json()

        response = client.put(f"/api/media/books/{created['id']}", headers=headers, data={
            'title': '',
            'file': (io.BytesIO(b'%PDF-1.4 fake'), 'guide.pdf'),
        }, content_type='multipart/form-data')

        assert response.status_code == 400
        assert os.listdir(app.config['UPLOAD_FOLDER']) == []

    def test_upload_folder_created_at_startup(self, app):
        assert os.path.isdir(app.config['UPLOAD_FOLDER'])

    def test_book_requires_file_or_url(self, client, teacher):
        _, headers = teacher
        response = client.post('/api/media/books', headers=headers, json={'title': 'Empty'})
        assert response.status_code == 400

    def test_notes_crud(self, client, teacher):
        _, headers = teacher
        response = client.post('/api/media/notes', headers=headers, json={'title': 'Tips', 'content': 'Reuse jars'})
        note_id = response.get_json()['id']

        response = client.put(f'/api/media/notes/{note_id}', headers=headers, json={'content': 'Reuse bags'})
        assert response.get_json()['content'] == 'Reuse bags'

        assert client.delete(f'/api/media/notes/{note_id}', headers=headers).status_code == 200
        assert client.get(f'/api/media/notes/{note_id}').status_code == 404

    def test_student_cannot_upload(self, client, student):
        _, headers = student
        response = client.post('/api/media/notes', headers=headers, json={'title': 'T', 'content': 'c'})
        assert response.status_code == 403

    def test_unknown_media_kind(self, client):
        assert client.get('/api/media/podcasts').status_code == 404

    def test_newest_first(self, client, teacher, services, mock_firestore):
        teacher_id, _ = teacher
        first = services['media'].create_media('notes', {'title': 'First', 'content': 'a'}, uploaded_by=teacher_id)
        services['media'].create_media('notes', {'title': 'Second', 'content': 'b'}, uploaded_by=teacher_id)
        mock_firestore.collection('notes').document(first['id']).update({'created_at': datetime(2020, 1, 1)})

        titles = [n['title'] for n in client.get('/api/media/notes').get_json()]
        assert titles == ['Second', 'First']
