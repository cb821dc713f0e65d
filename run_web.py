import uvicorn
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config.config import WEB_HOST, WEB_PORT

if __name__ == "__main__":
    print("🚀 Starting Build Wheel web server...")
    print("🌍 Open the following URL in your browser:")
    print(f"   http://localhost:{WEB_PORT}")

    # "src.web_server:app" refers to src/web_server.py -> app object
    uvicorn.run("src.web_server:app", host=WEB_HOST, port=WEB_PORT, reload=True)
