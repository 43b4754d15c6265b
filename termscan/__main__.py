import uvicorn
from termscan.config import Settings
from termscan.main import app

if __name__ == '__main__':
    uvicorn.run(app, host='0.0.0.0', port=Settings().PORT)
