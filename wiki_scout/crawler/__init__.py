"""wiki_scout.crawler: HTTP-доступ к API: построение адресов и потоковая загрузка пачек."""
