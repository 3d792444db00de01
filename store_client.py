import copy
import firebase_admin
from firebase_admin import credentials, firestore
from contextlib import asynccontextmanager
from fastapi import FastAPI
from config import settings
from services.ai_service import AIService
from services.seed_service import seed_demo_data
import logging

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

COLLECTIONS = ("users", "credentials", "sessions", "drivers", "packages", "routes", "notifications")

class MemoryCollection:
    """Dict-backed document collection. Documents are copied on the way in and out."""

    def __init__(self, name):
        self.name = name
        self._docs = {}

    def get(self, doc_id):
        doc = self._docs.get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    def set(self, doc_id, data):
        self._docs[doc_id] = copy.deepcopy(data)
        return data

    def delete(self, doc_id):
        return self._docs.pop(doc_id, None) is not None

    def stream(self):
        return [copy.deepcopy(doc) for doc in self._docs.values()]

class FirestoreCollection:
    """Same interface as MemoryCollection, over a Firestore collection reference."""

    def __init__(self, collection_ref):
        self.name = collection_ref.id
        self._ref = collection_ref

    def get(self, doc_id):
        doc = self._ref.document(doc_id).get()
        if not doc.exists:
            return None
        return doc.to_dict()

    def set(self, doc_id, data):
        self._ref.document(doc_id).set(data)
        return data

    def delete(self, doc_id):
        doc_ref = self._ref.document(doc_id)
        if not doc_ref.get().exists:
            return False
        doc_ref.delete()
        return True

    def stream(self):
        return [doc.to_dict() for doc in self._ref.stream()]

class Store:
    def __init__(self, collections):
        self._collections = collections

    def __getattr__(self, name):
        try:
            return self.__dict__["_collections"][name]
        except KeyError:
            raise AttributeError(name) from None

def memory_store():
    return Store({name: MemoryCollection(name) for name in COLLECTIONS})

def firestore_store(db):
    return Store({name: FirestoreCollection(db.collection(name)) for name in COLLECTIONS})

@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Startup ---
    firebase_app = None
    db = None
    if settings.STORAGE_BACKEND == "firestore":
        try:
            cred = credentials.Certificate(settings.FIREBASE_CREDENTIALS)
            firebase_app = firebase_admin.initialize_app(cred, {
                'databaseURL': settings.DATABASE_URL
            })
            db = firestore.client(app=firebase_app, database_id=settings.FIRESTORE_DATABASE_ID)
            store = firestore_store(db)
            logger.info("Firebase Admin SDK initialized successfully.")
        except Exception as e:
            logger.error(f"Error initializing Firebase Admin SDK: {e}")
            raise
    else:
        store = memory_store()
        logger.info("Using in-memory store")

    if settings.SEED_DEMO_DATA:
        await seed_demo_data(store)

    app.state.store = store
    app.state.ai_service = AIService.from_settings(settings)
    yield

    # --- Shutdown ---
    try:
        if db is not None:
            logger.info("Closing Firestore client...")
            db.close()
        if firebase_app is not None:
            firebase_admin.delete_app(firebase_app)
            logger.info("Firebase Admin SDK app deleted successfully.")
    except Exception as e:
        logger.error(f"Error deleting Firebase Admin SDK app: {e}")
