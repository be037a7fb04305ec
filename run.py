# run.py
from dotenv import load_dotenv
import os
basedir = os.path.abspath(os.path.dirname(__file__))
# 이 디렉터리의 '.env' 파일을 앱 생성 전에 로드합니다.
load_dotenv(dotenv_path=os.path.join(basedir, '.env'))

from petigram import create_app

app = create_app()

if __name__ == '__main__':
    host = os.getenv('FLASK_RUN_HOST', '127.0.0.1')
    port = int(os.getenv('FLASK_RUN_PORT', 5000))
    debug = app.config.get('DEBUG', False)
    # 리로더는 프로세스를 두 번 띄워 세션 구독도 두 번 생기므로 끕니다.
    app.run(host=host, port=port, debug=debug, use_reloader=False)
