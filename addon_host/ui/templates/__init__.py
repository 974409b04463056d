from .template_catalog import TemplateCatalog, TemplateInfo
