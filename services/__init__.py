import requests

# Reuse HTTP connections to upstream APIs (connection pooling)
http_session = requests.Session()
http_session.headers.update({'User-Agent': 'MediaProxy/1.0'})
