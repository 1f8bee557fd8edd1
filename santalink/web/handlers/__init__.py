from santalink.web.handlers import health, organizer, viewer

routes = [*organizer.routes, *viewer.routes, *health.routes]
