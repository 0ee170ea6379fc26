import os
import tempfile

# Importing gallery.main builds the default app, which creates its upload
# directory; keep that out of the working tree.
os.environ.setdefault("UPLOAD_DIR", os.path.join(tempfile.gettempdir(), "gallery_test_uploads"))
