from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

# Campos comunes a todo objeto guardado en el almacén de contenido
class StoredObject(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    slug: str
    title: str
    created_at: datetime
    modified_at: Optional[datetime] = None

# Imagen almacenada en Cloudinary (original + versión para mostrar)
class Photo(BaseModel):
    url: str
    display_url: str
