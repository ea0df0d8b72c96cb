from models.db_storage import DBStorage

# Engine and tables are created by storage.reload(), called from create_app()
storage = DBStorage()
