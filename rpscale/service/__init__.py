"""Mobile-facing configuration, response documents, Bonjour description and UDP discovery."""