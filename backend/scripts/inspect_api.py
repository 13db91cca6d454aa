from fastapi.testclient import TestClient
from backend.app import app

client = TestClient(app)

print('POST /quiz/start')
r = client.post('/quiz/start', json={'user_id': 'inspector', 'n_questions': 3, 'mode': 'CAPITALS'})
print(r.status_code)
print(r.json())

if r.status_code == 200:
    sid = r.json()['session_id']
    while True:
        q = client.get(f'/quiz/question/{sid}')
        if q.status_code != 200:
            break
        qdata = q.json()
        print(f"\nGET /quiz/question/{sid} [{qdata['index'] + 1}/{qdata['total']}]")
        print(qdata['prompt_text'], qdata['options'])
        a = client.post('/quiz/answer', json={
            'session_id': sid,
            'question_id': qdata['question_id'],
            'answer': qdata['options'][0],
        })
        print(a.json())
        client.post(f'/quiz/next/{sid}')

    print('\nGET /quiz/summary')
    print(client.get(f'/quiz/summary/{sid}').json())
else:
    print('Start failed')
